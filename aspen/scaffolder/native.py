"""Framework-native project generators.

``NATIVE_GENERATORS`` maps a ``(framework, language)`` pair to the commands
that scaffold a project with the framework's own tooling.  Pairs missing from
the table have no native generator and go straight to a bundled template.
"""

from __future__ import annotations

from pathlib import Path

from aspen.options.models import ProjectOptions
from aspen.process import CommandRunner
from aspen.scaffolder.package_manager import CommandStep, PackageManager, StepAction

_INIT = CommandStep(StepAction.INIT)
_TSC_INIT = CommandStep(StepAction.EXEC, ("tsc", "--init"))
_TS_DEV = ("typescript", "@types/node", "ts-node-dev", "rimraf")

NATIVE_GENERATORS: dict[tuple[str, str], tuple[CommandStep, ...]] = {
    ("express", "typescript"): (
        _INIT,
        CommandStep(StepAction.ADD, ("express", "dotenv", "cors", "helmet")),
        CommandStep(StepAction.ADD_DEV, (*_TS_DEV, "@types/express", "@types/cors")),
        _TSC_INIT,
    ),
    ("express", "javascript"): (
        _INIT,
        CommandStep(StepAction.ADD, ("express", "dotenv", "cors", "helmet")),
    ),
    ("fastify", "typescript"): (
        _INIT,
        CommandStep(StepAction.ADD, ("fastify", "dotenv", "@fastify/cors")),
        CommandStep(StepAction.ADD_DEV, _TS_DEV),
        _TSC_INIT,
    ),
    ("fastify", "javascript"): (
        _INIT,
        CommandStep(StepAction.ADD, ("fastify", "dotenv", "@fastify/cors")),
    ),
    ("nestjs", "typescript"): (
        CommandStep(
            StepAction.RAW,
            ("npx", "@nestjs/cli", "new", "{name}",
             "--package-manager", "{package_manager}", "--skip-git"),
            in_parent=True,
        ),
    ),
    ("hono", "typescript"): (
        CommandStep(
            StepAction.RAW,
            ("npm", "create", "hono@latest", "{name}", "--", "--template", "nodejs"),
            in_parent=True,
        ),
    ),
    ("hono", "javascript"): (
        CommandStep(StepAction.RAW, ("npm", "create", "hono@latest", "{name}"), in_parent=True),
    ),
    ("adonisjs", "typescript"): (
        CommandStep(StepAction.RAW, ("npm", "init", "adonisjs@latest", "{name}"), in_parent=True),
    ),
}


class NativeGenerator:
    """Runs the registered native generator commands for a project."""

    def __init__(
        self,
        runner: CommandRunner,
        registry: dict[tuple[str, str], tuple[CommandStep, ...]] | None = None,
        timeout_seconds: int | None = None,
    ) -> None:
        self.runner = runner
        self.registry = NATIVE_GENERATORS if registry is None else registry
        self.timeout_seconds = timeout_seconds

    def is_registered(self, framework: str, language: str) -> bool:
        return (framework, language) in self.registry

    def commands(self, project_dir: Path, options: ProjectOptions) -> list[tuple[list[str], Path]]:
        """Return ``(argv, cwd)`` pairs for the pair's generator, in order."""
        steps = self.registry.get((options.framework, options.language.value), ())
        pm = PackageManager(options.package_manager.value)
        return [
            (pm.render(step, options), project_dir.parent if step.in_parent else project_dir)
            for step in steps
        ]

    async def generate(self, project_dir: Path, options: ProjectOptions) -> None:
        """Run every command; the first failure raises ``CommandError``."""
        for argv, cwd in self.commands(project_dir, options):
            await self.runner.run(argv, cwd=cwd, timeout=self.timeout_seconds)
