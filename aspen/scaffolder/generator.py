"""Main scaffolding orchestrator.

Takes resolved ``ProjectOptions`` and produces a project directory:

1. refuse a non-empty target unless overwriting was confirmed
2. make sure the package manager is installed
3. produce the skeleton (native generator, falling back to a bundled template)
4. install the ORM and feature packages
5. create the standard ``src/`` layout and configuration files
6. merge package.json scripts
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from pathlib import Path

from aspen.config import Config
from aspen.errors import DirectoryNotEmptyError
from aspen.options.models import ProjectOptions
from aspen.process import CommandRunner
from aspen.scaffolder.augmenter import AugmentReport, ProjectAugmenter
from aspen.scaffolder.files import ProjectFiles
from aspen.scaffolder.materializer import TemplateMaterializer
from aspen.scaffolder.native import NativeGenerator
from aspen.scaffolder.package_manager import PackageManager
from aspen.scaffolder.strategy import GenerationResult, GenerationStrategySelector
from aspen.utils import is_directory_empty, print_step


@dataclass
class ProjectReport:
    """Everything one ``generate`` call did."""

    project_dir: Path
    generation: GenerationResult
    augmentation: AugmentReport = field(default_factory=AugmentReport)
    files: list[Path] = field(default_factory=list)
    scripts: dict[str, str] | None = None
    duration_seconds: float = 0.0


class ProjectGenerator:
    """Scaffolds one project from resolved options.

    Collaborators default to the real implementations built from *config*;
    tests pass their own (typically a recording command runner).
    """

    def __init__(
        self,
        options: ProjectOptions,
        config: Config | None = None,
        runner: CommandRunner | None = None,
        selector: GenerationStrategySelector | None = None,
        augmenter: ProjectAugmenter | None = None,
        files: ProjectFiles | None = None,
    ) -> None:
        self.options = options
        self.config = config or Config()
        self.runner = runner or CommandRunner(
            timeout_seconds=self.config.timeouts.command, verbose=self.config.verbose
        )
        self.selector = selector or GenerationStrategySelector(
            NativeGenerator(self.runner, timeout_seconds=self.config.timeouts.generator),
            TemplateMaterializer(),
        )
        self.augmenter = augmenter or ProjectAugmenter(self.runner)
        self.files = files or ProjectFiles()

    async def generate(self, project_dir: str | Path, overwrite: bool = False) -> ProjectReport:
        """Generate the project into *project_dir*.

        Args:
            project_dir: Target directory; created if missing.
            overwrite: Proceed even if the directory already has content.

        Raises:
            DirectoryNotEmptyError: If the directory has content and
                *overwrite* is ``False``.  Nothing is written in that case.
            UnsupportedCombinationError: If no skeleton could be produced.
            CommandError: If an install or post-install step fails.
            TemplateCopyError: If writing files fails.
        """
        start = time.monotonic()
        root = Path(project_dir)
        if not overwrite and not is_directory_empty(root):
            raise DirectoryNotEmptyError(root)

        await asyncio.to_thread(root.mkdir, parents=True, exist_ok=True)

        pm = PackageManager(self.options.package_manager.value)
        await pm.ensure_available(self.runner)

        print_step(f"Creating {self.options.framework} project")
        generation = await self.selector.generate(root, self.options)

        augmentation = await self.augmenter.augment(root, self.options)

        print_step("Setting up project structure")
        await self.files.create_structure(root, self.options)
        written = await self.files.write_config_files(root, self.options)
        scripts = await self.files.update_package_scripts(root, self.options)

        return ProjectReport(
            project_dir=root,
            generation=generation,
            augmentation=augmentation,
            files=written,
            scripts=scripts,
            duration_seconds=time.monotonic() - start,
        )
