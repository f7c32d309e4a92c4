"""Command-line entry point for ``aspen`` and ``python -m aspen``."""

from __future__ import annotations

import argparse
import asyncio
import sys

from aspen import __version__
from aspen.commands import COMMANDS
from aspen.config import Config
from aspen.errors import AspenError
from aspen.updates import check_for_updates
from aspen.utils import console, print_error


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aspen",
        description="Aspen -- scaffolding for Node.js backend projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  aspen create demo-api\n"
            "  aspen create demo-api -t express-typescript --orm none --features dotenv,docker -y\n"
            "  aspen list\n"
            "  aspen init\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"aspen {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Stream output of external commands",
    )
    parser.add_argument(
        "--no-update-check", action="store_true",
        help="Skip the check for a newer aspen release",
    )

    subparsers = parser.add_subparsers(dest="command")
    for name, (module, help_text) in COMMANDS.items():
        sub = subparsers.add_parser(name, help=help_text, description=help_text)
        module.add_arguments(sub)
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Environment settings with command-line flags applied on top."""
    config = Config.from_env()
    updates: dict[str, object] = {}
    if args.verbose:
        updates["verbose"] = True
    if args.no_update_check:
        updates["check_updates"] = False
    return config.model_copy(update=updates) if updates else config


async def _run(args: argparse.Namespace, config: Config) -> None:
    module, _ = COMMANDS[args.command]
    await module.run(args, config)
    if args.command != "list":
        await check_for_updates(config)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_config(args)
        asyncio.run(_run(args, config))
    except AspenError as exc:
        print_error(f"Error: {exc}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted.[/yellow]")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
