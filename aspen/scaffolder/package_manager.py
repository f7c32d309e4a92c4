"""Package-manager command rendering.

Recipes elsewhere describe *what* to run as ``CommandStep`` values (init,
add, add-dev, exec, dlx, raw); this module turns a step into the argv for the
selected package manager so the recipes stay package-manager agnostic.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from aspen.errors import CommandError, PackageManagerUnavailableError
from aspen.utils import print_warning

if TYPE_CHECKING:
    from aspen.options.models import ProjectOptions
    from aspen.process import CommandRunner


class StepAction(str, Enum):
    """Kind of package-manager operation."""

    INIT = "init"
    ADD = "add"
    ADD_DEV = "add_dev"
    EXEC = "exec"  # run a locally installed binary
    DLX = "dlx"  # download and run a package binary
    RAW = "raw"  # argv used as given, after placeholder expansion


@dataclass(frozen=True)
class CommandStep:
    """One command in a recipe.

    ``args`` of a ``RAW`` step may contain ``{name}`` and
    ``{package_manager}`` placeholders.  ``in_parent`` steps run in the parent
    of the project directory (generators that create the directory themselves).
    """

    action: StepAction
    args: tuple[str, ...] = ()
    in_parent: bool = False


PM_PREFIXES: dict[str, dict[StepAction, tuple[str, ...]]] = {
    "npm": {
        StepAction.INIT: ("npm", "init", "-y"),
        StepAction.ADD: ("npm", "install"),
        StepAction.ADD_DEV: ("npm", "install", "-D"),
        StepAction.EXEC: ("npx",),
        StepAction.DLX: ("npx",),
    },
    "yarn": {
        StepAction.INIT: ("yarn", "init", "-y"),
        StepAction.ADD: ("yarn", "add"),
        StepAction.ADD_DEV: ("yarn", "add", "-D"),
        StepAction.EXEC: ("yarn",),
        StepAction.DLX: ("yarn", "dlx"),
    },
    "pnpm": {
        StepAction.INIT: ("pnpm", "init"),
        StepAction.ADD: ("pnpm", "add"),
        StepAction.ADD_DEV: ("pnpm", "add", "-D"),
        StepAction.EXEC: ("pnpm", "exec"),
        StepAction.DLX: ("pnpm", "dlx"),
    },
}

LOCK_FILES: dict[str, str] = {
    "npm": "package-lock.json",
    "yarn": "yarn.lock",
    "pnpm": "pnpm-lock.yaml",
}


class PackageManager:
    """Renders ``CommandStep`` values for one package manager."""

    def __init__(self, name: str) -> None:
        if name not in PM_PREFIXES:
            raise PackageManagerUnavailableError(name, "unsupported package manager")
        self.name = name
        self._prefixes = PM_PREFIXES[name]

    def render(self, step: CommandStep, options: ProjectOptions | None = None) -> list[str]:
        """Return the argv for *step*."""
        if step.action is StepAction.RAW:
            values = {
                "name": options.name if options else "",
                "package_manager": self.name,
            }
            return [arg.format(**values) for arg in step.args]
        return [*self._prefixes[step.action], *step.args]

    def add(self, packages: list[str], dev: bool = False) -> list[str]:
        """Shortcut for an install command."""
        action = StepAction.ADD_DEV if dev else StepAction.ADD
        return self.render(CommandStep(action, tuple(packages)))

    def run_script(self, script: str) -> str:
        """Shell text that runs a package.json script (used in generated files)."""
        if self.name == "npm":
            return "npm test" if script == "test" else f"npm run {script}"
        return f"{self.name} {script}"

    def ci_install(self) -> str:
        """Shell text for a reproducible install (Dockerfile, CI)."""
        if self.name == "npm":
            return "npm ci"
        return f"{self.name} install --frozen-lockfile"

    @property
    def lock_file(self) -> str:
        return LOCK_FILES[self.name]

    async def ensure_available(self, runner: CommandRunner) -> None:
        """Make sure the executable exists, installing yarn/pnpm through npm if needed.

        Raises:
            PackageManagerUnavailableError: If it is missing and cannot be installed.
        """
        if await runner.is_available(self.name):
            return
        if self.name == "npm":
            raise PackageManagerUnavailableError("npm", "install Node.js to get npm")

        print_warning(f"{self.name} not found. Installing {self.name} globally with npm...")
        try:
            await runner.run(["npm", "install", "-g", self.name])
        except CommandError as exc:
            raise PackageManagerUnavailableError(
                self.name, f"automatic install failed; run 'npm install -g {self.name}' ({exc})"
            ) from exc
