"""Aspen configuration.

Typed runtime settings for a single CLI invocation. All settings use Pydantic
v2 models so they are validated at construction time; values come from
defaults, then environment variables, then command-line flags.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from aspen.errors import ConfigError

_TRUTHY = {"1", "true", "yes", "on"}


class TimeoutConfig(BaseModel):
    """Wall-clock limits (seconds) for external processes."""

    command: int = Field(
        default=300, ge=10, description="Timeout for package installs and post-install steps"
    )
    generator: int = Field(
        default=600, ge=30, description="Timeout for framework-native project generators"
    )
    version_check: float = Field(
        default=3.0, gt=0, description="Timeout for the PyPI update check"
    )


class Config(BaseModel):
    """Global Aspen configuration.

    Created once by the CLI entry point and passed to the commands, which hand
    the relevant pieces to the generator and the command runner.
    """

    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    verbose: bool = Field(
        default=False, description="Stream subprocess output instead of capturing it"
    )
    check_updates: bool = Field(default=True)
    distribution: str = Field(default="aspen-cli")
    update_index_url: str = Field(default="https://pypi.org/pypi")

    @property
    def update_url(self) -> str:
        """JSON metadata URL for the published distribution."""
        return f"{self.update_index_url.rstrip('/')}/{self.distribution}/json"

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            ASPEN_COMMAND_TIMEOUT, ASPEN_GENERATOR_TIMEOUT, ASPEN_VERBOSE,
            ASPEN_NO_UPDATE_CHECK, ASPEN_INDEX_URL.

        Raises:
            ConfigError: If a timeout is not an integer or is out of range.
        """
        try:
            return cls._from_env()
        except ValidationError as exc:
            raise ConfigError(exc.errors()[0]["msg"]) from exc
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    @classmethod
    def _from_env(cls) -> "Config":
        timeout_kwargs: dict[str, Any] = {}
        if os.environ.get("ASPEN_COMMAND_TIMEOUT"):
            timeout_kwargs["command"] = int(os.environ["ASPEN_COMMAND_TIMEOUT"])
        if os.environ.get("ASPEN_GENERATOR_TIMEOUT"):
            timeout_kwargs["generator"] = int(os.environ["ASPEN_GENERATOR_TIMEOUT"])

        kwargs: dict[str, Any] = {"timeouts": TimeoutConfig(**timeout_kwargs)}
        if os.environ.get("ASPEN_VERBOSE"):
            kwargs["verbose"] = os.environ["ASPEN_VERBOSE"].strip().lower() in _TRUTHY
        if os.environ.get("ASPEN_NO_UPDATE_CHECK", "").strip().lower() in _TRUTHY:
            kwargs["check_updates"] = False
        if os.environ.get("ASPEN_INDEX_URL"):
            kwargs["update_index_url"] = os.environ["ASPEN_INDEX_URL"]

        return cls(**kwargs)
