"""Shared utility functions for Aspen.

Provides async command execution, project-name and directory helpers, and
Rich-based console reporting used by every command.
"""

from __future__ import annotations

import asyncio
import os
import re
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from aspen.errors import InvalidProjectNameError

console = Console()

PROJECT_NAME_PATTERN = re.compile(r"[a-z0-9-_]+")

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int = 120,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: Argument list; the first item is the executable.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams).
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A timeout is reported as
        returncode ``-1`` with an explanatory stderr.

    Raises:
        FileNotFoundError: If the executable does not exist.
        PermissionError: If the executable cannot be run.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Project name / directory helpers
# ---------------------------------------------------------------------------


def check_project_name(name: str) -> str | None:
    """Return a problem description for *name*, or ``None`` if it is valid."""
    if not name:
        return "Project name cannot be empty"
    if not PROJECT_NAME_PATTERN.fullmatch(name):
        return (
            "Project name can only contain lowercase letters, numbers, "
            "hyphens, and underscores"
        )
    return None


def validate_project_name(name: str) -> str:
    """Return *name* unchanged or raise ``InvalidProjectNameError``."""
    problem = check_project_name(name)
    if problem is not None:
        raise InvalidProjectNameError(name, problem)
    return name


def resolve_output_dir(project_name: str, directory: str | Path | None = None) -> Path:
    """Return the absolute project directory: ``<directory or cwd>/<project_name>``."""
    base = Path(directory) if directory else Path.cwd()
    return (base / project_name).resolve()


def is_directory_empty(path: str | Path) -> bool:
    """Return ``True`` if *path* does not exist or has no entries.

    A path that exists but is not a readable directory counts as non-empty.
    """
    dir_path = Path(path)
    if not dir_path.exists():
        return True
    try:
        return not any(dir_path.iterdir())
    except OSError:
        return False


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_step(message: str) -> None:
    """Print a cyan step marker."""
    console.print(f"[bold cyan]>[/bold cyan] {message}")


def print_command(cmd: list[str], cwd: str | Path | None = None) -> None:
    """Echo a command before it runs."""
    where = f" [dim]({cwd})[/dim]" if cwd else ""
    console.print(f"  [dim]$[/dim] {' '.join(cmd)}{where}")


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def create_progress() -> Progress:
    """Create a Rich spinner for long-running steps.

    Returns:
        A ``Progress`` instance suitable for use as a context manager.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
