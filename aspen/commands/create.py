"""``aspen create`` - interview the user and scaffold a new project."""

from __future__ import annotations

import argparse
from typing import Any

from aspen.config import Config
from aspen.errors import DirectoryNotEmptyError, InvalidOptionError, InvalidProjectNameError
from aspen.options.catalog import CATALOG
from aspen.options.models import ProjectOptions
from aspen.options.prompts import (
    ask_project_name,
    confirm_overwrite,
    defaults_chooser,
    interactive_chooser,
)
from aspen.options.resolver import OptionResolver
from aspen.process import CommandRunner
from aspen.scaffolder.generator import ProjectGenerator, ProjectReport
from aspen.scaffolder.materializer import TemplateMaterializer
from aspen.scaffolder.package_manager import PackageManager
from aspen.utils import (
    console,
    format_duration,
    is_directory_empty,
    print_summary_table,
    print_success,
    resolve_output_dir,
    validate_project_name,
)


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", nargs="?", help="Project name ([a-z0-9-_]+)")
    parser.add_argument(
        "-d", "--directory", default=None,
        help="Parent directory for the project (default: current directory)",
    )
    parser.add_argument(
        "-t", "--template", default=None,
        help="Language (typescript) or bundled template (express-typescript)",
    )
    parser.add_argument("--framework", default=None, help="Framework to use")
    parser.add_argument("--orm", default=None, help="ORM to use (or 'none')")
    parser.add_argument("--database", default=None, help="Database to use")
    parser.add_argument(
        "--features", default=None,
        help="Comma-separated features (or 'none')",
    )
    parser.add_argument(
        "--package-manager", choices=["npm", "yarn", "pnpm"], default=None,
        help="Package manager for installs",
    )
    parser.add_argument("--description", default="", help="Project description")
    parser.add_argument(
        "-y", "--yes", action="store_true",
        help="Accept defaults for every option that is not preset",
    )
    parser.add_argument(
        "-f", "--force", action="store_true",
        help="Write into a non-empty directory without asking",
    )


def parse_template(template: str, bundled: list[str] | None = None) -> dict[str, str]:
    """Map ``--template`` to preset selections.

    Accepts a language name (``typescript``) or a bundled template name
    (``express-typescript``).
    """
    if template in CATALOG.languages:
        return {"language": template}
    names = TemplateMaterializer().available() if bundled is None else bundled
    if template in names:
        framework, _, language = template.rpartition("-")
        return {"language": language, "framework": framework}
    raise InvalidOptionError("template", template, [*CATALOG.languages, *names])


def parse_features(raw: str | None) -> list[str] | None:
    """Split a ``--features`` value; ``"none"`` selects nothing."""
    if raw is None:
        return None
    text = raw.strip().lower()
    if text in ("", "none"):
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def presets_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Collect the option presets given on the command line."""
    presets: dict[str, Any] = {}
    if args.template:
        presets.update(parse_template(args.template))
    for key in ("framework", "orm", "database", "package_manager"):
        value = getattr(args, key, None)
        if value:
            presets[key] = value
    features = parse_features(args.features)
    if features is not None:
        presets["features"] = features
    return presets


def print_next_steps(report: ProjectReport, options: ProjectOptions) -> None:
    """Tell the user how to start the new project."""
    pm = PackageManager(options.package_manager.value)
    console.print()
    print_success(
        f"Project created successfully in {format_duration(report.duration_seconds)}"
    )
    console.print("\n[bold]Next steps:[/bold]")
    console.print(f"  cd [cyan]{report.project_dir}[/cyan]")
    if not (report.project_dir / "node_modules").exists():
        console.print(f"  [cyan]{pm.name} install[/cyan]")
    console.print(f"  [cyan]{pm.run_script('dev')}[/cyan]")
    if options.has_database and "docker" in options.features:
        console.print("  [cyan]docker compose up -d[/cyan]")
    console.print()


async def run(
    args: argparse.Namespace,
    config: Config,
    runner: CommandRunner | None = None,
) -> ProjectReport:
    """Run the ``create`` command."""
    if args.name:
        name = validate_project_name(args.name)
    elif args.yes:
        raise InvalidProjectNameError("", "a project name is required with --yes")
    else:
        name = ask_project_name()

    chooser = defaults_chooser if args.yes else interactive_chooser
    options = OptionResolver().interview(
        name, chooser, presets_from_args(args), description=args.description
    )

    project_dir = resolve_output_dir(name, args.directory)
    overwrite = args.force
    if not overwrite and not is_directory_empty(project_dir):
        if args.yes or not confirm_overwrite(str(project_dir)):
            raise DirectoryNotEmptyError(project_dir)
        overwrite = True

    print_summary_table(options.summary(), title="Project")
    generator = ProjectGenerator(options, config, runner=runner)
    report = await generator.generate(project_dir, overwrite=overwrite)
    print_next_steps(report, options)
    return report
