"""Shared pytest fixtures for the Aspen test suite.

Provides reusable fixtures for:
- A recording command runner that never spawns processes
- ProjectOptions construction with sensible defaults
- Mock subprocess helpers
- Bundled-template trees in temporary directories
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from aspen.errors import CommandError
from aspen.options.models import ProjectOptions
from aspen.process import CommandResult


# ---------------------------------------------------------------------------
# Recording command runner
# ---------------------------------------------------------------------------


class FakeRunner:
    """Stands in for ``CommandRunner``.

    Every call is recorded as ``(argv, cwd, timeout)``.  ``fail_on`` makes a
    command fail when the predicate matches its argv; ``effects`` maps an argv
    prefix to a callback run with the working directory (e.g. to create the
    files ``prisma init`` would write).
    """

    def __init__(
        self,
        fail_on: Callable[[list[str]], bool] | None = None,
        available: bool = True,
    ) -> None:
        self.calls: list[tuple[list[str], Path | None, int | None]] = []
        self.fail_on = fail_on
        self.available = available
        self.effects: dict[tuple[str, ...], Callable[[Path], None]] = {}

    @property
    def commands(self) -> list[list[str]]:
        return [argv for argv, _, _ in self.calls]

    async def run(
        self, cmd: list[str], cwd: str | Path | None = None, timeout: int | None = None
    ) -> CommandResult:
        work_dir = Path(cwd) if cwd else None
        self.calls.append((list(cmd), work_dir, timeout))
        if self.fail_on is not None and self.fail_on(list(cmd)):
            raise CommandError(cmd, work_dir, exit_code=1, stderr="simulated failure")
        for prefix, effect in self.effects.items():
            if tuple(cmd[: len(prefix)]) == prefix and work_dir is not None:
                effect(work_dir)
        return CommandResult(command=list(cmd), cwd=work_dir, exit_code=0)

    async def is_available(self, executable: str) -> bool:
        return self.available


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@pytest.fixture
def make_options() -> Callable[..., ProjectOptions]:
    """Factory for ``ProjectOptions`` defaulting to express/typescript/none."""

    def factory(**overrides: Any) -> ProjectOptions:
        values: dict[str, Any] = {
            "name": "demo-api",
            "language": "typescript",
            "framework": "express",
            "orm": "none",
            "database": "none",
            "features": frozenset(),
            "package_manager": "npm",
        }
        values.update(overrides)
        values["features"] = frozenset(values["features"])
        return ProjectOptions(**values)

    return factory


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """

    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------


@pytest.fixture
def skeleton_dir(tmp_path: Path) -> Path:
    """A skeleton root holding one ``express-typescript`` template."""
    root = tmp_path / "skeletons"
    template = root / "express-typescript"
    (template / "src").mkdir(parents=True)
    (template / "package.json.j2").write_text(
        '{\n  "name": "{{ project_name }}",\n  "description": "{{ project_description }}"\n}\n',
        encoding="utf-8",
    )
    (template / "src" / "index.ts").write_text(
        "const greeting = `{{ not a tag }}`;\n", encoding="utf-8"
    )
    (template / "logo.bin").write_bytes(bytes(range(256)))
    (template / "node_modules" / "left-pad").mkdir(parents=True)
    (template / "node_modules" / "left-pad" / "index.js").write_text("x", encoding="utf-8")
    (template / ".git").mkdir()
    (template / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    return root


@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Path for a generated project (not created)."""
    return tmp_path / "work" / "demo-api"
