"""Exception hierarchy for Aspen.

Every failure that can reach the command line derives from ``AspenError`` so
the CLI entry point can print a single human-readable message and exit with a
non-zero status.
"""

from __future__ import annotations

from pathlib import Path


class AspenError(Exception):
    """Base exception for all Aspen errors."""

    code: str = "ASPEN-UNKNOWN"


class InvalidProjectNameError(AspenError):
    """Raised when a project name does not match ``[a-z0-9-_]+``."""

    code = "ASPEN-NAME"

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid project name {name!r}: {reason}")


class InvalidOptionError(AspenError):
    """Raised when a selection is not a legal edge in the option catalog.

    ``edge`` names the stage that failed (``"language"``, ``"framework"``,
    ``"orm"``, ``"database"``, ``"features"`` or ``"package_manager"``).
    """

    code = "ASPEN-OPTION"

    def __init__(self, edge: str, value: object, allowed: list[str] | None = None) -> None:
        self.edge = edge
        self.value = value
        self.allowed = list(allowed or [])
        message = f"Invalid {edge}: {value!r}"
        if self.allowed:
            message += f" (expected one of: {', '.join(self.allowed)})"
        super().__init__(message)


class DirectoryNotEmptyError(AspenError):
    """Raised when the target directory already has content and overwriting was not confirmed."""

    code = "ASPEN-DIR"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Directory {self.path} is not empty")


class UnsupportedCombinationError(AspenError):
    """Raised when neither a native generator nor a template can build a project."""

    code = "ASPEN-UNSUPPORTED"

    def __init__(self, framework: str, language: str, details: list[str] | None = None) -> None:
        self.framework = framework
        self.language = language
        self.details = list(details or [])
        message = f"Cannot create a {framework} project with {language}"
        if self.details:
            message += ": " + "; ".join(self.details)
        super().__init__(message)


class CommandError(AspenError):
    """Raised when an external command fails, times out or cannot be spawned."""

    code = "ASPEN-COMMAND"

    def __init__(
        self,
        command: list[str],
        cwd: Path | None,
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
        timed_out: bool = False,
        reason: str = "",
    ) -> None:
        self.command = list(command)
        self.cwd = cwd
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        self.timed_out = timed_out

        joined = " ".join(self.command)
        if reason:
            detail = reason
        elif timed_out:
            detail = "timed out"
        else:
            detail = f"exited with code {exit_code}"
        message = f"Command '{joined}' {detail} (cwd: {cwd})"
        output = (stderr or stdout).strip()
        if output:
            tail = "\n".join(output.splitlines()[-10:])
            message += f"\n{tail}"
        super().__init__(message)


class TemplateCopyError(AspenError):
    """Raised when copying or rendering a template tree fails."""

    code = "ASPEN-TEMPLATE"

    def __init__(self, source: Path, destination: Path, reason: str) -> None:
        self.source = Path(source)
        self.destination = Path(destination)
        self.reason = reason
        super().__init__(f"Failed to copy {self.source} -> {self.destination}: {reason}")


class PackageManagerUnavailableError(AspenError):
    """Raised when the selected package manager is missing and cannot be installed."""

    code = "ASPEN-PM"

    def __init__(self, name: str, reason: str = "") -> None:
        self.name = name
        message = f"Package manager '{name}' is not available"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NotANodeProjectError(AspenError):
    """Raised when ``init`` runs in a directory without a package.json."""

    code = "ASPEN-INIT"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(
            f"No package.json found in {self.path}. Run 'npm init' first, "
            "or use 'aspen create' to create a new project."
        )


class ConfigError(AspenError):
    """Raised when an ``ASPEN_*`` environment variable holds an unusable value."""

    code = "ASPEN-CONFIG"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid configuration: {reason}")
