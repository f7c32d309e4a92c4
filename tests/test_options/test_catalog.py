"""Tests for the option catalog (aspen.options.catalog)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from aspen.options.catalog import (
    CATALOG,
    FEATURES,
    LANGUAGES,
    ORM_DATABASES,
    DatabaseRule,
    OptionCatalog,
)

pytestmark = pytest.mark.unit


class TestReferenceData:
    def test_languages(self):
        assert list(LANGUAGES) == ["typescript", "javascript"]

    def test_typescript_frameworks(self):
        assert list(LANGUAGES["typescript"].frameworks) == [
            "express", "fastify", "nestjs", "hono", "adonisjs",
        ]

    def test_javascript_frameworks(self):
        assert list(LANGUAGES["javascript"].frameworks) == ["express", "fastify", "hono"]

    def test_adonisjs_orms(self):
        assert CATALOG.framework("typescript", "adonisjs").orms == ("lucid", "prisma", "none")

    def test_every_framework_allows_none(self):
        for lang in LANGUAGES.values():
            for fw in lang.frameworks.values():
                assert "none" in fw.orms, (lang.name, fw.name)

    def test_every_orm_has_a_database_rule(self):
        for lang in LANGUAGES.values():
            for fw in lang.frameworks.values():
                for orm in fw.orms:
                    assert orm in ORM_DATABASES

    def test_forced_databases(self):
        assert ORM_DATABASES["mongoose"].forced == "mongodb"
        assert ORM_DATABASES["none"].forced == "none"
        assert ORM_DATABASES["prisma"].forced is None

    def test_feature_defaults(self):
        assert CATALOG.default_features() == [
            "swagger", "jest", "eslint", "prettier", "docker",
            "winston", "dotenv", "cors", "helmet",
        ]
        assert len(FEATURES) == 14

    def test_entries_are_frozen(self):
        with pytest.raises(ValidationError):
            CATALOG.framework("typescript", "express").name = "koa"

    def test_framework_names(self):
        assert CATALOG.framework_names() == ["express", "fastify", "nestjs", "hono", "adonisjs"]


class TestFindInvalidEdge:
    def test_valid_chain(self):
        assert CATALOG.find_invalid_edge("typescript", "express", "prisma", "postgresql") is None

    @pytest.mark.parametrize(
        ("args", "edge"),
        [
            (("python", "express", "none", "none"), "language"),
            (("javascript", "nestjs", "none", "none"), "framework"),
            (("typescript", "express", "sequelize", "mysql"), "orm"),
            (("typescript", "express", "drizzle", "mongodb"), "database"),
            (("typescript", "express", "none", "postgresql"), "database"),
            (("typescript", "express", "mongoose", "postgresql"), "database"),
        ],
    )
    def test_first_invalid_edge(self, args, edge):
        error = CATALOG.find_invalid_edge(*args)
        assert error is not None
        assert error.edge == edge

    def test_chain_checked_in_order(self):
        error = CATALOG.find_invalid_edge("javascript", "nestjs", "bogus", "bogus")
        assert error.edge == "framework"

    def test_unknown_feature(self):
        error = CATALOG.find_invalid_edge(
            "typescript", "express", "none", "none", ["docker", "graphql"]
        )
        assert error.edge == "features"
        assert error.value == "graphql"

    def test_unknown_package_manager(self):
        error = CATALOG.find_invalid_edge(
            "typescript", "express", "none", "none", [], "bun"
        )
        assert error.edge == "package_manager"

    def test_custom_catalog(self):
        catalog = OptionCatalog(orm_databases={**ORM_DATABASES, "prisma": DatabaseRule(choices=("sqlite",))})
        assert catalog.find_invalid_edge("typescript", "express", "prisma", "sqlite") is None
        assert catalog.find_invalid_edge("typescript", "express", "prisma", "mysql").edge == "database"
