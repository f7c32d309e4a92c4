"""Aspen sub-commands.  Each module exposes ``add_arguments(parser)`` and ``run(args, config)``."""

from aspen.commands import create, init, listing

COMMANDS = {
    "create": (create, "Create a new backend project"),
    "list": (listing, "List available frameworks, ORMs, databases and features"),
    "init": (init, "Add Aspen features to the project in the current directory"),
}

__all__ = ["COMMANDS", "create", "init", "listing"]
