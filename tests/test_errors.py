"""Unit tests for the exception hierarchy (aspen.errors)."""

from __future__ import annotations

from pathlib import Path

import pytest

from aspen.errors import (
    AspenError,
    CommandError,
    ConfigError,
    DirectoryNotEmptyError,
    InvalidOptionError,
    InvalidProjectNameError,
    NotANodeProjectError,
    PackageManagerUnavailableError,
    TemplateCopyError,
    UnsupportedCombinationError,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "error",
    [
        InvalidProjectNameError("Bad", "uppercase"),
        InvalidOptionError("orm", "sequelize", ["prisma", "none"]),
        DirectoryNotEmptyError(Path("/tmp/demo")),
        UnsupportedCombinationError("adonisjs", "typescript"),
        CommandError(["npm", "install"], None, 1),
        TemplateCopyError(Path("a"), Path("b"), "boom"),
        PackageManagerUnavailableError("pnpm"),
        NotANodeProjectError(Path("/tmp/demo")),
        ConfigError("timeout out of range"),
    ],
)
def test_every_error_is_an_aspen_error(error: AspenError):
    assert isinstance(error, AspenError)
    assert error.code.startswith("ASPEN-")
    assert str(error)


def test_invalid_option_lists_allowed_values():
    error = InvalidOptionError("orm", "sequelize", ["prisma", "typeorm", "none"])
    assert error.edge == "orm"
    assert error.value == "sequelize"
    assert "prisma, typeorm, none" in str(error)


def test_unsupported_combination_names_pair_and_details():
    error = UnsupportedCombinationError("hono", "javascript", ["native: exited with code 1"])
    assert error.framework == "hono"
    assert error.language == "javascript"
    assert "hono" in str(error) and "javascript" in str(error)
    assert "native: exited with code 1" in str(error)


def test_command_error_keeps_last_output_lines():
    stderr = "\n".join(f"line {i}" for i in range(30))
    error = CommandError(["npm", "install"], Path("/tmp/demo"), 1, stderr=stderr)
    message = str(error)
    assert "line 29" in message
    assert "line 20" in message
    assert "line 19" not in message
    assert "exited with code 1" in message


def test_command_error_timeout_message():
    error = CommandError(["npx", "@nestjs/cli"], None, -1, timed_out=True)
    assert "timed out" in str(error)


def test_command_error_reason_overrides_exit_code():
    error = CommandError(["pnpm"], None, 127, reason="could not be started")
    assert "could not be started" in str(error)
    assert "127" not in str(error)
