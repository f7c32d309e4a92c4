"""``aspen list`` - print the option catalog."""

from __future__ import annotations

import argparse

from rich.table import Table

from aspen.config import Config
from aspen.options.catalog import CATALOG, PACKAGE_MANAGERS, OptionCatalog
from aspen.scaffolder.materializer import TemplateMaterializer
from aspen.scaffolder.native import NATIVE_GENERATORS
from aspen.utils import console


def add_arguments(parser: argparse.ArgumentParser) -> None:
    """``list`` takes no arguments."""


def build_tables(catalog: OptionCatalog = CATALOG, templates: list[str] | None = None) -> list[Table]:
    """One rich table per catalog section."""
    bundled = TemplateMaterializer().available() if templates is None else templates

    frameworks = Table(title="Frameworks", header_style="bold cyan")
    frameworks.add_column("Language", style="bold")
    frameworks.add_column("Framework", style="cyan")
    frameworks.add_column("ORMs")
    frameworks.add_column("Generation", style="dim")
    for lang in catalog.languages.values():
        for fw in lang.frameworks.values():
            methods = []
            if (fw.name, lang.name) in NATIVE_GENERATORS:
                methods.append("native")
            if f"{fw.name}-{lang.name}" in bundled:
                methods.append("template")
            frameworks.add_row(lang.name, fw.name, ", ".join(fw.orms), " + ".join(methods))

    orms = Table(title="ORMs", header_style="bold cyan")
    orms.add_column("ORM", style="cyan")
    orms.add_column("Databases")
    orms.add_column("Description", style="dim")
    for name, orm in catalog.orms.items():
        rule = catalog.database_rule(name)
        databases = ", ".join(rule.choices) if rule else ""
        orms.add_row(name, databases, orm.description)

    features = Table(title="Features", header_style="bold cyan")
    features.add_column("Feature", style="cyan")
    features.add_column("Default", justify="center")
    features.add_column("Description", style="dim")
    for feature in catalog.features.values():
        features.add_row(
            feature.name, "[green]yes[/green]" if feature.default_selected else "", feature.description
        )

    managers = Table(title="Package managers", header_style="bold cyan")
    managers.add_column("Package manager", style="cyan")
    for pm in PACKAGE_MANAGERS:
        managers.add_row(pm)

    return [frameworks, orms, features, managers]


async def run(args: argparse.Namespace, config: Config) -> None:
    """Run the ``list`` command."""
    for table in build_tables():
        console.print(table)
        console.print()
