"""External process execution for package managers and project generators.

Every install, post-install step and native generator goes through a
``CommandRunner`` so the outcome contract is the same everywhere: exit code 0
is success; a non-zero exit, a timeout or a spawn failure raises
``CommandError`` with the command, working directory and captured output.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

from aspen.errors import CommandError
from aspen.utils import create_progress, print_command, run_command


@dataclass
class CommandResult:
    """Structured result of a successful command."""

    command: list[str]
    cwd: Path | None
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0


class CommandRunner:
    """Runs external commands one at a time and enforces the exit-code contract."""

    def __init__(self, timeout_seconds: int = 300, verbose: bool = False) -> None:
        """Initialize the runner.

        Args:
            timeout_seconds: Default per-command timeout.
            verbose: Stream child output to the terminal instead of capturing it.
        """
        self.timeout_seconds = timeout_seconds
        self.verbose = verbose

    async def run(
        self,
        cmd: list[str],
        cwd: str | Path | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        """Run *cmd* and return its result.

        Raises:
            CommandError: On non-zero exit, timeout, or if the executable is
                missing or not runnable.
        """
        work_dir = Path(cwd) if cwd else None
        limit = timeout or self.timeout_seconds
        print_command(cmd, work_dir)

        start = time.monotonic()
        try:
            if self.verbose:
                exit_code, stdout, stderr = await run_command(
                    cmd, cwd=work_dir, timeout=limit, capture=False
                )
            else:
                with create_progress() as progress:
                    progress.add_task(f"Running {cmd[0]}...", total=None)
                    exit_code, stdout, stderr = await run_command(
                        cmd, cwd=work_dir, timeout=limit
                    )
        except FileNotFoundError as exc:
            raise CommandError(
                cmd,
                work_dir,
                exit_code=127,
                reason=f"could not be started ({exc}); make sure {cmd[0]} is installed and on PATH",
            ) from exc
        except PermissionError as exc:
            raise CommandError(
                cmd, work_dir, exit_code=126, reason=f"is not executable ({exc})"
            ) from exc

        if exit_code != 0:
            raise CommandError(
                cmd,
                work_dir,
                exit_code=exit_code,
                stdout=stdout,
                stderr=stderr,
                timed_out=exit_code == -1,
            )

        return CommandResult(
            command=list(cmd),
            cwd=work_dir,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
            duration_seconds=time.monotonic() - start,
        )

    async def is_available(self, executable: str) -> bool:
        """Return ``True`` if ``<executable> --version`` exits with code 0."""
        try:
            exit_code, _, _ = await run_command([executable, "--version"], timeout=30)
        except (FileNotFoundError, PermissionError):
            return False
        return exit_code == 0
