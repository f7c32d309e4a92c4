"""Post-generation augmentation: ORM and feature packages.

Both passes are driven by plain data.  ``ORM_RECIPES`` and
``FEATURE_RECIPES`` describe which packages to install for a selection,
which commands to run afterwards and which config files to patch; the
``ProjectAugmenter`` turns a recipe into package-manager commands and runs
them in order.  The first failing command aborts the pass with
``CommandError``; packages installed before it stay installed.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from pathlib import Path

from aspen.options.models import ProjectOptions
from aspen.process import CommandRunner
from aspen.scaffolder.package_manager import CommandStep, PackageManager, StepAction
from aspen.utils import print_step, print_warning


# ---------------------------------------------------------------------------
# Recipe types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageRule:
    """Packages installed together when every condition holds.

    ``None`` for ``languages``/``frameworks``/``databases`` means "any".
    ``requires`` lists other features that must also be selected.
    """

    packages: tuple[str, ...]
    dev: bool = False
    languages: frozenset[str] | None = None
    frameworks: frozenset[str] | None = None
    databases: frozenset[str] | None = None
    requires: frozenset[str] = frozenset()

    def applies(self, options: ProjectOptions) -> bool:
        return (
            (self.languages is None or options.language.value in self.languages)
            and (self.frameworks is None or options.framework in self.frameworks)
            and (self.databases is None or options.database in self.databases)
            and self.requires <= options.features
        )


@dataclass(frozen=True)
class ConfigRewrite:
    """Regex substitution applied to a generated config file.

    ``replacement`` may use ``{database}``; it is expanded before the
    substitution.  Skipped when no database is selected.
    """

    path: str
    pattern: str
    replacement: str


@dataclass(frozen=True)
class Recipe:
    """What to install and run for one ORM or feature."""

    rules: tuple[PackageRule, ...] = ()
    post_install: tuple[CommandStep, ...] = ()
    rewrites: tuple[ConfigRewrite, ...] = ()


@dataclass
class AugmentReport:
    """Commands run and files patched by one pass."""

    commands: list[list[str]] = field(default_factory=list)
    rewritten: list[Path] = field(default_factory=list)

    def extend(self, other: "AugmentReport") -> None:
        self.commands.extend(other.commands)
        self.rewritten.extend(other.rewritten)


# ---------------------------------------------------------------------------
# Recipe tables
# ---------------------------------------------------------------------------

_TS = frozenset({"typescript"})


def _rule(*packages: str, dev: bool = False, **conditions) -> PackageRule:
    return PackageRule(
        packages=packages,
        dev=dev,
        **{key: frozenset(value) for key, value in conditions.items()},
    )


PRISMA_PROVIDER = ConfigRewrite(
    path="prisma/schema.prisma",
    pattern=r'(datasource\s+\w+\s*\{[^}]*?\bprovider\s*=\s*)"[^"]*"',
    replacement=r'\g<1>"{database}"',
)

ORM_RECIPES: dict[str, Recipe] = {
    "prisma": Recipe(
        rules=(_rule("prisma", dev=True), _rule("@prisma/client")),
        post_install=(CommandStep(StepAction.EXEC, ("prisma", "init")),),
        rewrites=(PRISMA_PROVIDER,),
    ),
    "typeorm": Recipe(
        rules=(
            _rule("typeorm", "reflect-metadata"),
            _rule("pg", databases={"postgresql"}),
            _rule("mysql2", databases={"mysql"}),
            _rule("sqlite3", databases={"sqlite"}),
            _rule("mongodb", databases={"mongodb"}),
        ),
    ),
    "drizzle": Recipe(
        rules=(
            _rule("drizzle-orm"),
            _rule("drizzle-kit", dev=True),
            _rule("postgres", databases={"postgresql"}),
            _rule("mysql2", databases={"mysql"}),
            _rule("better-sqlite3", databases={"sqlite"}),
            _rule("@types/better-sqlite3", dev=True, databases={"sqlite"}, languages=_TS),
        ),
    ),
    "mongoose": Recipe(rules=(_rule("mongoose"),)),
    "sequelize": Recipe(
        rules=(
            _rule("sequelize"),
            _rule("pg", "pg-hstore", databases={"postgresql"}),
            _rule("mysql2", databases={"mysql"}),
            _rule("sqlite3", databases={"sqlite"}),
        ),
    ),
    "lucid": Recipe(
        rules=(
            _rule("@adonisjs/lucid"),
            _rule("pg", databases={"postgresql"}),
            _rule("mysql2", databases={"mysql"}),
            _rule("better-sqlite3", databases={"sqlite"}),
        ),
        post_install=(
            CommandStep(StepAction.RAW, ("node", "ace", "configure", "@adonisjs/lucid")),
        ),
    ),
    "none": Recipe(),
}

FEATURE_RECIPES: dict[str, Recipe] = {
    "eslint": Recipe(
        rules=(
            _rule("eslint", dev=True),
            _rule("@typescript-eslint/eslint-plugin", "@typescript-eslint/parser",
                  dev=True, languages=_TS),
        ),
    ),
    "prettier": Recipe(
        rules=(
            _rule("prettier", dev=True),
            _rule("eslint-config-prettier", "eslint-plugin-prettier",
                  dev=True, requires={"eslint"}),
        ),
    ),
    "biome": Recipe(rules=(_rule("@biomejs/biome", dev=True),)),
    "jest": Recipe(
        rules=(
            _rule("jest", dev=True),
            _rule("ts-jest", "@types/jest", dev=True, languages=_TS),
        ),
    ),
    "swagger": Recipe(
        rules=(
            _rule("swagger-ui-express", "swagger-jsdoc", frameworks={"express"}),
            _rule("@types/swagger-ui-express", "@types/swagger-jsdoc",
                  dev=True, frameworks={"express"}, languages=_TS),
            _rule("@fastify/swagger", "@fastify/swagger-ui", frameworks={"fastify"}),
            _rule("@nestjs/swagger", frameworks={"nestjs"}),
            _rule("@hono/swagger-ui", frameworks={"hono"}),
        ),
    ),
    "docker": Recipe(),
    "github-actions": Recipe(),
    "husky": Recipe(
        rules=(_rule("husky", "lint-staged", dev=True),),
        post_install=(
            CommandStep(StepAction.RAW, ("git", "init")),
            CommandStep(StepAction.EXEC, ("husky", "init")),
        ),
    ),
    "winston": Recipe(rules=(_rule("winston"),)),
    "dotenv": Recipe(rules=(_rule("dotenv"),)),
    "jwt": Recipe(
        rules=(
            _rule("jsonwebtoken"),
            _rule("@types/jsonwebtoken", dev=True, languages=_TS),
            _rule("passport", "passport-jwt", frameworks={"express"}),
            _rule("@types/passport", "@types/passport-jwt",
                  dev=True, frameworks={"express"}, languages=_TS),
            _rule("@nestjs/passport", "@nestjs/jwt", "passport-jwt", frameworks={"nestjs"}),
            _rule("@types/passport-jwt", dev=True, frameworks={"nestjs"}, languages=_TS),
        ),
    ),
    "rate-limiting": Recipe(
        rules=(
            _rule("express-rate-limit", frameworks={"express"}),
            _rule("@fastify/rate-limit", frameworks={"fastify"}),
            _rule("@nestjs/throttler", frameworks={"nestjs"}),
        ),
    ),
    "cors": Recipe(
        rules=(
            _rule("cors", frameworks={"express"}),
            _rule("@types/cors", dev=True, frameworks={"express"}, languages=_TS),
            _rule("@fastify/cors", frameworks={"fastify"}),
        ),
    ),
    "helmet": Recipe(
        rules=(
            _rule("helmet", frameworks={"express"}),
            _rule("@fastify/helmet", frameworks={"fastify"}),
        ),
    ),
}


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def plan_recipe(recipe: Recipe, options: ProjectOptions) -> list[list[str]]:
    """Return the commands *recipe* needs for *options*, in run order.

    Runtime packages go in one install command and dev packages in another,
    followed by the post-install steps.
    """
    pm = PackageManager(options.package_manager.value)
    runtime: list[str] = []
    dev: list[str] = []
    for rule in recipe.rules:
        if rule.applies(options):
            target = dev if rule.dev else runtime
            target.extend(p for p in rule.packages if p not in target)

    commands: list[list[str]] = []
    if runtime:
        commands.append(pm.add(runtime))
    if dev:
        commands.append(pm.add(dev, dev=True))
    commands.extend(pm.render(step, options) for step in recipe.post_install)
    return commands


def apply_rewrite(text: str, rewrite: ConfigRewrite, database: str) -> tuple[str, int]:
    """Apply one rewrite to *text*; returns the new text and the match count."""
    replacement = rewrite.replacement.replace("{database}", database)
    return re.subn(rewrite.pattern, replacement, text, count=1)


# ---------------------------------------------------------------------------
# ProjectAugmenter
# ---------------------------------------------------------------------------


class ProjectAugmenter:
    """Installs ORM and feature packages into a generated project."""

    def __init__(
        self,
        runner: CommandRunner,
        orm_recipes: dict[str, Recipe] | None = None,
        feature_recipes: dict[str, Recipe] | None = None,
    ) -> None:
        self.runner = runner
        self.orm_recipes = ORM_RECIPES if orm_recipes is None else orm_recipes
        self.feature_recipes = FEATURE_RECIPES if feature_recipes is None else feature_recipes

    def orm_commands(self, options: ProjectOptions) -> list[list[str]]:
        recipe = self.orm_recipes.get(options.orm, Recipe())
        return plan_recipe(recipe, options)

    def feature_commands(self, options: ProjectOptions) -> list[list[str]]:
        """Commands for every selected feature, in table order."""
        commands: list[list[str]] = []
        for feature, recipe in self.feature_recipes.items():
            if feature in options.features:
                commands.extend(plan_recipe(recipe, options))
        return commands

    async def apply_orm(self, project_dir: Path, options: ProjectOptions) -> AugmentReport:
        """Install the ORM, run its init step and patch its config."""
        report = AugmentReport()
        recipe = self.orm_recipes.get(options.orm, Recipe())
        commands = plan_recipe(recipe, options)
        if not commands and not recipe.rewrites:
            return report

        print_step(f"Adding {options.orm}")
        for argv in commands:
            await self.runner.run(argv, cwd=project_dir)
            report.commands.append(argv)

        if options.has_database:
            for rewrite in recipe.rewrites:
                path = await self._rewrite(project_dir, rewrite, options.database)
                if path is not None:
                    report.rewritten.append(path)
        return report

    async def apply_features(self, project_dir: Path, options: ProjectOptions) -> AugmentReport:
        """Install packages for every selected feature."""
        report = AugmentReport()
        commands = self.feature_commands(options)
        if not commands:
            return report

        print_step("Adding selected features")
        for argv in commands:
            await self.runner.run(argv, cwd=project_dir)
            report.commands.append(argv)
        return report

    async def augment(self, project_dir: Path, options: ProjectOptions) -> AugmentReport:
        """Run the ORM pass, then the feature pass."""
        report = await self.apply_orm(project_dir, options)
        report.extend(await self.apply_features(project_dir, options))
        return report

    async def _rewrite(
        self, project_dir: Path, rewrite: ConfigRewrite, database: str
    ) -> Path | None:
        path = project_dir / rewrite.path
        if not path.is_file():
            print_warning(f"{rewrite.path} not found; set the database provider manually")
            return None
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        updated, count = apply_rewrite(text, rewrite, database)
        if count == 0:
            print_warning(f"No provider setting found in {rewrite.path}")
            return None
        await asyncio.to_thread(path.write_text, updated, encoding="utf-8")
        return path
