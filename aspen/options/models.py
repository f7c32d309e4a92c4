"""Pydantic v2 models for resolved project options."""

from __future__ import annotations

from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from aspen.options.catalog import CATALOG
from aspen.utils import check_project_name


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class LanguageName(str, Enum):
    """Project language."""
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"


class PackageManagerName(str, Enum):
    """Supported Node.js package managers."""
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


# ---------------------------------------------------------------------------
# ProjectOptions
# ---------------------------------------------------------------------------

class ProjectOptions(BaseModel):
    """The fully resolved configuration for one ``create`` invocation.

    Built once before any filesystem change and read-only afterwards.  Every
    ``language -> framework -> orm -> database`` edge and every feature key is
    checked at construction time against the catalog passed as validation
    context (``{"catalog": ...}``), or the built-in ``CATALOG``.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name, [a-z0-9-_]+")
    language: LanguageName
    framework: str
    orm: str = Field(default="none")
    database: str = Field(default="none")
    features: frozenset[str] = Field(default_factory=frozenset)
    package_manager: PackageManagerName = Field(default=PackageManagerName.NPM)
    description: str = Field(default="", description="Short project description")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        problem = check_project_name(value)
        if problem is not None:
            raise ValueError(problem)
        return value

    @model_validator(mode="after")
    def _check_catalog_edges(self, info: ValidationInfo) -> "ProjectOptions":
        catalog = (info.context or {}).get("catalog", CATALOG)
        error = catalog.find_invalid_edge(
            self.language.value,
            self.framework,
            self.orm,
            self.database,
            self.features,
            self.package_manager.value,
        )
        if error is not None:
            raise ValueError(str(error))
        return self

    # -- Convenience -------------------------------------------------------

    @property
    def is_typescript(self) -> bool:
        return self.language is LanguageName.TYPESCRIPT

    @property
    def has_database(self) -> bool:
        return self.database != "none"

    @property
    def template_name(self) -> str:
        """Bundled template key, e.g. ``express-typescript``."""
        return f"{self.framework}-{self.language.value}"

    def has(self, *features: str) -> bool:
        """Return ``True`` if every feature in *features* is selected."""
        return all(f in self.features for f in features)

    def summary(self) -> dict[str, str]:
        """Key/value rows for a console summary table."""
        return {
            "Project": self.name,
            "Language": self.language.value,
            "Framework": self.framework,
            "ORM": self.orm,
            "Database": self.database,
            "Features": ", ".join(sorted(self.features)) or "(none)",
            "Package manager": self.package_manager.value,
        }
