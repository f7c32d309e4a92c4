"""Best-effort check for a newer published release.

Queries the package index JSON API with ``httpx.AsyncClient``.  Any network,
HTTP or parsing failure makes the check a silent no-op.
"""

from __future__ import annotations

import re

import httpx
from pydantic import BaseModel

from aspen import __version__
from aspen.config import Config
from aspen.utils import console


class UpdateInfo(BaseModel):
    """Result of a successful update check."""

    current: str
    latest: str

    @property
    def update_available(self) -> bool:
        return _version_key(self.latest) > _version_key(self.current)


def _version_key(version: str) -> tuple[int, ...]:
    """Numeric release segments of *version* (``"1.10.0rc1"`` -> ``(1, 10, 0)``)."""
    release = re.match(r"\d+(?:\.\d+)*", version.strip())
    if release is None:
        return ()
    return tuple(int(part) for part in release.group(0).split("."))


async def fetch_latest_version(config: Config) -> str | None:
    """Return the latest published version, or ``None`` if it cannot be determined."""
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeouts.version_check)
        ) as client:
            response = await client.get(config.update_url)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError):
        return None

    version = data.get("info", {}).get("version") if isinstance(data, dict) else None
    return version if isinstance(version, str) and version else None


async def check_for_updates(
    config: Config, current: str = __version__
) -> UpdateInfo | None:
    """Print an upgrade hint when a newer release exists.

    Returns the check result, or ``None`` when the check is disabled or failed.
    """
    if not config.check_updates:
        return None

    latest = await fetch_latest_version(config)
    if latest is None:
        return None

    info = UpdateInfo(current=current, latest=latest)
    if info.update_available:
        console.print(
            f"[yellow]Update available[/yellow] [dim]{current}[/dim] -> "
            f"[green]{latest}[/green]. Run [cyan]pip install -U {config.distribution}[/cyan] to update."
        )
    return info
