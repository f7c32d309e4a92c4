"""Bundled template materialization.

A bundled template is a directory under ``aspen/scaffolder/skeletons/`` named
``<framework>-<language>``.  Materializing it copies the tree into the project
directory; files ending in ``.j2`` are rendered against a closed set of tags
and written without the suffix, everything else is copied byte-for-byte.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Any

from jinja2 import TemplateError

from aspen.errors import TemplateCopyError
from aspen.options.models import ProjectOptions
from aspen.scaffolder.templates import TemplateRenderer

MARKER_SUFFIX = ".j2"
EXCLUDED_NAMES = frozenset({".git", "node_modules"})

_DEFAULT_SKELETON_DIR = Path(__file__).parent / "skeletons"


def template_context(options: ProjectOptions) -> dict[str, Any]:
    """The tags available to ``.j2`` files in a skeleton."""
    return {
        "project_name": options.name,
        "project_description": options.description
        or f"A {options.framework} backend application",
        "language": options.language.value,
        "framework": options.framework,
        "package_manager": options.package_manager.value,
    }


class TemplateMaterializer:
    """Copies bundled skeleton trees into project directories."""

    def __init__(
        self,
        skeleton_dir: str | Path | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.skeleton_dir = Path(skeleton_dir) if skeleton_dir else _DEFAULT_SKELETON_DIR
        self.renderer = renderer or TemplateRenderer()

    def available(self) -> list[str]:
        """Names of the bundled templates."""
        if not self.skeleton_dir.is_dir():
            return []
        return sorted(p.name for p in self.skeleton_dir.iterdir() if p.is_dir())

    def has_template(self, name: str) -> bool:
        return (self.skeleton_dir / name).is_dir()

    async def materialize(
        self, name: str, destination: Path, options: ProjectOptions
    ) -> list[Path]:
        """Copy the bundled template *name* into *destination*."""
        source = self.skeleton_dir / name
        if not source.is_dir():
            raise TemplateCopyError(source, destination, "template not found")
        return await self.copy_tree(source, destination, template_context(options))

    async def copy_tree(
        self, source: Path, destination: Path, context: dict[str, Any]
    ) -> list[Path]:
        """Copy *source* into *destination*, rendering marked files.

        Returns the written destination paths.

        Raises:
            TemplateCopyError: On any filesystem or rendering failure.  Files
                already written are left in place.
        """
        return await asyncio.to_thread(self._copy_tree, source, destination, context)

    def _copy_tree(
        self, source: Path, destination: Path, context: dict[str, Any]
    ) -> list[Path]:
        written: list[Path] = []
        try:
            destination.mkdir(parents=True, exist_ok=True)
            entries = sorted(source.iterdir())
        except OSError as exc:
            raise TemplateCopyError(source, destination, str(exc)) from exc

        for entry in entries:
            if entry.name in EXCLUDED_NAMES:
                continue
            if entry.is_dir():
                written.extend(self._copy_tree(entry, destination / entry.name, context))
            else:
                written.append(self._copy_file(entry, destination, context))
        return written

    def _copy_file(self, source: Path, destination: Path, context: dict[str, Any]) -> Path:
        try:
            if source.name.endswith(MARKER_SUFFIX):
                target = destination / source.name[: -len(MARKER_SUFFIX)]
                content = self.renderer.render_string(
                    source.read_text(encoding="utf-8"), context
                )
                target.write_text(content, encoding="utf-8")
                (destination / source.name).unlink(missing_ok=True)
            else:
                target = destination / source.name
                shutil.copyfile(source, target)
        except (OSError, TemplateError) as exc:
            raise TemplateCopyError(source, destination, str(exc)) from exc
        return target
