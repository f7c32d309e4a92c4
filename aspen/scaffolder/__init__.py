"""Aspen scaffolder - produces a project skeleton and layers packages and files on top.

Quick usage::

    from aspen.scaffolder import ProjectGenerator

    gen = ProjectGenerator(options)
    report = await gen.generate("/path/to/demo-api")
"""

from aspen.scaffolder.augmenter import ProjectAugmenter
from aspen.scaffolder.files import ProjectFiles
from aspen.scaffolder.generator import ProjectGenerator, ProjectReport
from aspen.scaffolder.materializer import TemplateMaterializer
from aspen.scaffolder.native import NativeGenerator
from aspen.scaffolder.strategy import (
    GenerationMethod,
    GenerationResult,
    GenerationStrategySelector,
    StrategyAttempt,
)
from aspen.scaffolder.templates import TemplateRenderer

__all__ = [
    "GenerationMethod",
    "GenerationResult",
    "GenerationStrategySelector",
    "NativeGenerator",
    "ProjectAugmenter",
    "ProjectFiles",
    "ProjectGenerator",
    "ProjectReport",
    "StrategyAttempt",
    "TemplateMaterializer",
    "TemplateRenderer",
]
