"""``aspen init`` - add features to the project in the current directory.

The language, framework, ORM, database and package manager are detected from the
project's files and used as presets; the feature stage is asked as usual,
without pre-selecting features whose package is already a dependency.
"""

from __future__ import annotations

import argparse
import json
import re
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

from aspen.commands.create import parse_features
from aspen.config import Config
from aspen.errors import NotANodeProjectError
from aspen.options.models import ProjectOptions
from aspen.options.prompts import defaults_chooser, interactive_chooser
from aspen.options.resolver import Choice, Chooser, OptionResolver, PromptStage
from aspen.process import CommandRunner
from aspen.scaffolder.augmenter import ProjectAugmenter
from aspen.scaffolder.files import ProjectFiles
from aspen.scaffolder.package_manager import LOCK_FILES, PackageManager
from aspen.utils import console, print_step, print_success

# dependency name -> framework; later entries win
FRAMEWORK_MARKERS: tuple[tuple[str, str], ...] = (
    ("express", "express"),
    ("fastify", "fastify"),
    ("@nestjs/core", "nestjs"),
    ("hono", "hono"),
    ("@adonisjs/core", "adonisjs"),
)

ORM_MARKERS: tuple[tuple[str, str], ...] = (
    ("prisma", "prisma"),
    ("@prisma/client", "prisma"),
    ("typeorm", "typeorm"),
    ("mongoose", "mongoose"),
    ("drizzle-orm", "drizzle"),
    ("sequelize", "sequelize"),
    ("@adonisjs/lucid", "lucid"),
)

DATABASE_MARKERS: tuple[tuple[str, str], ...] = (
    ("pg", "postgresql"),
    ("mysql", "mysql"),
    ("mysql2", "mysql"),
    ("sqlite3", "sqlite"),
    ("better-sqlite3", "sqlite"),
    ("mongodb", "mongodb"),
)


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--features", default=None, help="Comma-separated features to add (or 'none')"
    )
    parser.add_argument(
        "-y", "--yes", action="store_true", help="Accept detected values and default features"
    )


def read_package_json(root: Path) -> dict[str, Any]:
    path = root / "package.json"
    if not path.is_file():
        raise NotANodeProjectError(root)
    return json.loads(path.read_text(encoding="utf-8"))


def dependencies(package: Mapping[str, Any]) -> dict[str, str]:
    return {**package.get("dependencies", {}), **package.get("devDependencies", {})}


def detect_presets(root: Path, package: Mapping[str, Any]) -> dict[str, Any]:
    """Guess language, framework, ORM, database and package manager for *root*."""
    deps = dependencies(package)
    presets: dict[str, Any] = {
        "language": "typescript" if (root / "tsconfig.json").exists() else "javascript",
        "package_manager": "npm",
    }
    for dep, framework in FRAMEWORK_MARKERS:
        if dep in deps:
            presets["framework"] = framework
    for dep, orm in ORM_MARKERS:
        if dep in deps:
            presets["orm"] = orm
    for dep, database in DATABASE_MARKERS:
        if dep in deps:
            presets["database"] = database
    for name, lock_file in LOCK_FILES.items():
        if (root / lock_file).exists():
            presets["package_manager"] = name
    return presets


def project_name(package: Mapping[str, Any], root: Path) -> str:
    """A valid project name derived from package.json or the directory name."""
    raw = str(package.get("name") or root.name).split("/")[-1].lower()
    name = re.sub(r"[^a-z0-9-_]+", "-", raw).strip("-")
    return name or "app"


def skip_installed(chooser: Chooser, installed: Mapping[str, str]) -> Chooser:
    """Wrap *chooser* so installed features start deselected."""

    def choose(stage: PromptStage, choices: list[Choice], selection: Mapping[str, Any]) -> Any:
        if stage.key == "features":
            choices = [replace(c, selected=c.selected and c.value not in installed) for c in choices]
        return chooser(stage, choices, selection)

    return choose


def resolve_options(
    root: Path,
    package: Mapping[str, Any],
    chooser: Chooser,
    features: list[str] | None = None,
) -> ProjectOptions:
    """Build options for an existing project, dropping presets the catalog rejects."""
    resolver = OptionResolver()
    presets = detect_presets(root, package)

    framework = presets.get("framework")
    if framework and framework not in [c.value for c in resolver.frameworks(presets["language"])]:
        presets.pop("framework")
        presets.pop("orm", None)
    elif framework and presets.get("orm"):
        if presets["orm"] not in [c.value for c in resolver.orms(presets["language"], framework)]:
            presets.pop("orm")

    # a detected ORM never prompts for a database; fall back to its first one
    if presets.get("orm"):
        databases = [c.value for c in resolver.databases(presets["orm"])]
        if presets.get("database") not in databases:
            presets["database"] = databases[0]
    else:
        presets.pop("database", None)
    if features is not None:
        presets["features"] = features

    return resolver.interview(
        project_name(package, root),
        skip_installed(chooser, dependencies(package)),
        presets,
    )


async def run(
    args: argparse.Namespace,
    config: Config,
    root: Path | None = None,
    runner: CommandRunner | None = None,
) -> ProjectOptions:
    """Run the ``init`` command in *root* (default: the current directory)."""
    root = (root or Path.cwd()).resolve()
    package = read_package_json(root)
    console.print(
        f"\n[bold]Initializing Aspen in existing project: "
        f"[cyan]{package.get('name', root.name)}[/cyan][/bold]\n"
    )

    chooser = defaults_chooser if args.yes else interactive_chooser
    options = resolve_options(root, package, chooser, parse_features(args.features))

    runner = runner or CommandRunner(timeout_seconds=config.timeouts.command, verbose=config.verbose)
    await PackageManager(options.package_manager.value).ensure_available(runner)
    await ProjectAugmenter(runner).apply_features(root, options)

    files = ProjectFiles()
    print_step("Setting up project structure")
    await files.create_structure(root, options)
    print_step("Updating package.json")
    await files.update_package_scripts(root, options, overwrite=False)

    print_success("Aspen initialized successfully")
    return options
