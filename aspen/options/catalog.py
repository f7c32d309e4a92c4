"""Static option catalog.

Which frameworks exist per language, which ORMs are compatible per
(language, framework), which databases each ORM supports, and which features
can be toggled.  Everything here is immutable reference data created at import
time.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from aspen.errors import InvalidOptionError


class _Entry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""


class Database(_Entry):
    """A database engine."""


class Feature(_Entry):
    """An independently toggle-able add-on."""

    label: str = ""
    default_selected: bool = False


class DatabaseRule(BaseModel):
    """Databases an ORM can target.

    A rule with a single choice is *forced*: the choice is made for the user.
    """

    model_config = ConfigDict(frozen=True)

    choices: tuple[str, ...]

    @property
    def forced(self) -> str | None:
        return self.choices[0] if len(self.choices) == 1 else None


class Orm(_Entry):
    """An ORM; its database set lives in ``ORM_DATABASES``."""


class Framework(_Entry):
    """A web framework with the ORMs usable from it."""

    orms: tuple[str, ...] = Field(default=())


class Language(_Entry):
    """A project language and its frameworks (keyed by name)."""

    frameworks: dict[str, Framework] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

DATABASES: dict[str, Database] = {
    db.name: db
    for db in (
        Database(name="postgresql", description="PostgreSQL database"),
        Database(name="mysql", description="MySQL database"),
        Database(name="sqlite", description="SQLite database"),
        Database(name="mongodb", description="MongoDB database"),
        Database(name="none", description="No database"),
    )
}

ORMS: dict[str, Orm] = {
    orm.name: orm
    for orm in (
        Orm(name="prisma", description="Next-generation ORM for Node.js and TypeScript"),
        Orm(name="typeorm", description="ORM for TypeScript and JavaScript"),
        Orm(name="drizzle", description="TypeScript ORM for Node.js"),
        Orm(name="mongoose", description="MongoDB object modeling for Node.js"),
        Orm(name="sequelize", description="Promise-based ORM for Node.js"),
        Orm(name="lucid", description="AdonisJS built-in ORM"),
        Orm(name="none", description="No ORM"),
    )
}

_SQL = ("postgresql", "mysql", "sqlite")

ORM_DATABASES: dict[str, DatabaseRule] = {
    "prisma": DatabaseRule(choices=(*_SQL, "mongodb")),
    "typeorm": DatabaseRule(choices=(*_SQL, "mongodb")),
    "drizzle": DatabaseRule(choices=_SQL),
    "sequelize": DatabaseRule(choices=_SQL),
    "lucid": DatabaseRule(choices=_SQL),
    "mongoose": DatabaseRule(choices=("mongodb",)),
    "none": DatabaseRule(choices=("none",)),
}

_EXPRESS = "Fast, unopinionated, minimalist web framework for Node.js"
_FASTIFY = "Fast and low overhead web framework for Node.js"
_HONO = "Ultrafast web framework for the Edges"
_TS_ORMS = ("prisma", "typeorm", "drizzle", "mongoose", "none")
_JS_ORMS = ("prisma", "mongoose", "sequelize", "none")


def _frameworks(*items: Framework) -> dict[str, Framework]:
    return {fw.name: fw for fw in items}


LANGUAGES: dict[str, Language] = {
    "typescript": Language(
        name="typescript",
        description="TypeScript backend project",
        frameworks=_frameworks(
            Framework(name="express", description=_EXPRESS, orms=_TS_ORMS),
            Framework(name="fastify", description=_FASTIFY, orms=_TS_ORMS),
            Framework(
                name="nestjs",
                description=(
                    "Progressive Node.js framework for building efficient and "
                    "scalable server-side applications"
                ),
                orms=_TS_ORMS,
            ),
            Framework(
                name="hono",
                description=_HONO,
                orms=("prisma", "drizzle", "mongoose", "none"),
            ),
            Framework(
                name="adonisjs",
                description="Full-stack framework with a focus on developer ergonomics and speed",
                orms=("lucid", "prisma", "none"),
            ),
        ),
    ),
    "javascript": Language(
        name="javascript",
        description="JavaScript backend project",
        frameworks=_frameworks(
            Framework(name="express", description=_EXPRESS, orms=_JS_ORMS),
            Framework(name="fastify", description=_FASTIFY, orms=_JS_ORMS),
            Framework(name="hono", description=_HONO, orms=("prisma", "mongoose", "none")),
        ),
    ),
}

FEATURES: dict[str, Feature] = {
    f.name: f
    for f in (
        Feature(name="swagger", label="Swagger/OpenAPI",
                description="API documentation with Swagger/OpenAPI", default_selected=True),
        Feature(name="jest", label="Jest", description="Testing with Jest", default_selected=True),
        Feature(name="eslint", label="ESLint", description="Linting with ESLint",
                default_selected=True),
        Feature(name="prettier", label="Prettier", description="Code formatting with Prettier",
                default_selected=True),
        Feature(name="biome", label="Biome",
                description="Formatter, linter, bundler, and more for JavaScript and TypeScript"),
        Feature(name="docker", label="Docker",
                description="Docker configuration for containerization", default_selected=True),
        Feature(name="github-actions", label="GitHub Actions", description="CI/CD with GitHub Actions"),
        Feature(name="husky", label="Husky", description="Git hooks with Husky"),
        Feature(name="winston", label="Winston", description="Logging with Winston",
                default_selected=True),
        Feature(name="dotenv", label="dotenv", description="Environment variables with dotenv",
                default_selected=True),
        Feature(name="jwt", label="JWT Authentication",
                description="Authentication with JSON Web Tokens"),
        Feature(name="rate-limiting", label="Rate Limiting", description="API rate limiting"),
        Feature(name="cors", label="CORS", description="Cross-Origin Resource Sharing",
                default_selected=True),
        Feature(name="helmet", label="Helmet", description="Security with Helmet",
                default_selected=True),
    )
}

PACKAGE_MANAGERS: tuple[str, ...] = ("npm", "yarn", "pnpm")


class OptionCatalog:
    """Read-only view over the reference data with edge lookups."""

    def __init__(
        self,
        languages: dict[str, Language] | None = None,
        orm_databases: dict[str, DatabaseRule] | None = None,
        features: dict[str, Feature] | None = None,
    ) -> None:
        self.languages = languages if languages is not None else LANGUAGES
        self.orm_databases = orm_databases if orm_databases is not None else ORM_DATABASES
        self.features = features if features is not None else FEATURES
        self.orms = ORMS
        self.databases = DATABASES

    def language(self, name: str) -> Language | None:
        return self.languages.get(name)

    def framework(self, language: str, framework: str) -> Framework | None:
        lang = self.languages.get(language)
        if lang is None:
            return None
        return lang.frameworks.get(framework)

    def database_rule(self, orm: str) -> DatabaseRule | None:
        return self.orm_databases.get(orm)

    def default_features(self) -> list[str]:
        return [f.name for f in self.features.values() if f.default_selected]

    def find_invalid_edge(
        self,
        language: str,
        framework: str,
        orm: str,
        database: str,
        features: Iterable[str] = (),
        package_manager: str = "npm",
    ) -> InvalidOptionError | None:
        """Walk ``language -> framework -> orm -> database`` and return the first bad edge.

        Features and the package manager are checked after the chain.  Returns
        ``None`` when every selection is legal.
        """
        lang = self.languages.get(language)
        if lang is None:
            return InvalidOptionError("language", language, list(self.languages))

        fw = lang.frameworks.get(framework)
        if fw is None:
            return InvalidOptionError("framework", framework, list(lang.frameworks))

        if orm not in fw.orms:
            return InvalidOptionError("orm", orm, list(fw.orms))

        rule = self.orm_databases.get(orm)
        if rule is None:
            return InvalidOptionError("orm", orm, list(self.orm_databases))
        if database not in rule.choices:
            return InvalidOptionError("database", database, list(rule.choices))

        unknown = sorted(set(features) - set(self.features))
        if unknown:
            return InvalidOptionError("features", ", ".join(unknown), list(self.features))

        if package_manager not in PACKAGE_MANAGERS:
            return InvalidOptionError("package_manager", package_manager, list(PACKAGE_MANAGERS))

        return None

    def framework_names(self) -> list[str]:
        """Every framework name across all languages, in first-seen order."""
        seen: dict[str, None] = {}
        for lang in self.languages.values():
            for name in lang.frameworks:
                seen.setdefault(name, None)
        return list(seen)


CATALOG = OptionCatalog()
