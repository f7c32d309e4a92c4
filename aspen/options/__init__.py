"""Aspen option catalog and resolution.

Quick usage::

    from aspen.options import OptionResolver

    resolver = OptionResolver()
    options = resolver.resolve(
        "demo-api",
        {"language": "typescript", "framework": "express", "orm": "none",
         "features": ["dotenv", "docker"], "package_manager": "npm"},
    )
"""

from aspen.options.catalog import CATALOG, OptionCatalog
from aspen.options.models import LanguageName, PackageManagerName, ProjectOptions
from aspen.options.resolver import Choice, OptionResolver, PromptStage

__all__ = [
    "CATALOG",
    "Choice",
    "LanguageName",
    "OptionCatalog",
    "OptionResolver",
    "PackageManagerName",
    "ProjectOptions",
    "PromptStage",
]
