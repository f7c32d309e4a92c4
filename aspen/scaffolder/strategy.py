"""Generation strategy selection.

Implements the native generator -> bundled template -> fail chain:
1. If a native generator is registered for (framework, language), run it.
2. If it is not registered or fails, copy the bundled template for the pair.
3. If neither is available or both fail, raise ``UnsupportedCombinationError``.

Each step is recorded as a ``StrategyAttempt`` so the fallback decision can be
inspected after the fact.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from aspen.errors import AspenError, UnsupportedCombinationError
from aspen.options.models import ProjectOptions
from aspen.scaffolder.materializer import TemplateMaterializer
from aspen.scaffolder.native import NativeGenerator
from aspen.utils import print_success, print_warning


class GenerationMethod(str, Enum):
    """How the project skeleton was produced."""

    NATIVE = "native"
    TEMPLATE = "template"


@dataclass
class StrategyAttempt:
    """Record of a single generation attempt."""

    method: GenerationMethod
    success: bool
    error: str = ""
    duration_seconds: float = 0.0


@dataclass
class GenerationResult:
    """Outcome of the selector: the winning method and every attempt."""

    success: bool
    method: GenerationMethod | None
    attempts: list[StrategyAttempt] = field(default_factory=list)

    @property
    def fell_back(self) -> bool:
        return any(
            a.method is GenerationMethod.NATIVE and not a.success for a in self.attempts
        )

    def summary(self) -> str:
        status = "SUCCESS" if self.success else "FAILED"
        lines = [f"Status: {status}", f"Method: {self.method.value if self.method else '-'}"]
        for attempt in self.attempts:
            outcome = "ok" if attempt.success else f"failed: {attempt.error[:200]}"
            lines.append(f"  - {attempt.method.value}: {outcome}")
        return "\n".join(lines)


class GenerationStrategySelector:
    """Produces a project skeleton with the best available method."""

    def __init__(self, native: NativeGenerator, materializer: TemplateMaterializer) -> None:
        self.native = native
        self.materializer = materializer

    def plan(self, framework: str, language: str) -> list[GenerationMethod]:
        """Methods to try, in order; depends only on what is registered."""
        methods: list[GenerationMethod] = []
        if self.native.is_registered(framework, language):
            methods.append(GenerationMethod.NATIVE)
        if self.materializer.has_template(f"{framework}-{language}"):
            methods.append(GenerationMethod.TEMPLATE)
        return methods

    async def attempt(
        self, method: GenerationMethod, project_dir: Path, options: ProjectOptions
    ) -> StrategyAttempt:
        """Run one method and return its outcome instead of raising."""
        start = time.monotonic()
        try:
            if method is GenerationMethod.NATIVE:
                await self.native.generate(project_dir, options)
            else:
                await self.materializer.materialize(options.template_name, project_dir, options)
        except AspenError as exc:
            return StrategyAttempt(
                method=method,
                success=False,
                error=str(exc),
                duration_seconds=time.monotonic() - start,
            )
        return StrategyAttempt(
            method=method, success=True, duration_seconds=time.monotonic() - start
        )

    async def generate(self, project_dir: Path, options: ProjectOptions) -> GenerationResult:
        """Try each planned method until one succeeds.

        Raises:
            UnsupportedCombinationError: If nothing is registered for the pair
                or every registered method failed.  Partial output of a failed
                native generator is left in place.
        """
        framework, language = options.framework, options.language.value
        attempts: list[StrategyAttempt] = []

        for method in self.plan(framework, language):
            result = await self.attempt(method, project_dir, options)
            attempts.append(result)
            if result.success:
                print_success(f"Created {framework} project ({method.value})")
                return GenerationResult(success=True, method=method, attempts=attempts)
            print_warning(
                f"{method.value} generation failed for {framework} with {language}: "
                f"{result.error.splitlines()[0] if result.error else 'unknown error'}"
            )
            if method is GenerationMethod.NATIVE:
                print_warning(f"Using template as fallback for {framework} with {language}")

        details = [f"{a.method.value}: {a.error}" for a in attempts] or [
            "no native generator or template is registered"
        ]
        raise UnsupportedCombinationError(framework, language, details)
