"""Tests for ProjectOptions (aspen.options.models)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from aspen.options.catalog import Framework, Language, OptionCatalog
from aspen.options.models import LanguageName, PackageManagerName, ProjectOptions

pytestmark = pytest.mark.unit


class TestProjectOptions:
    def test_defaults(self):
        options = ProjectOptions(name="demo-api", language="typescript", framework="express")
        assert options.orm == "none"
        assert options.database == "none"
        assert options.features == frozenset()
        assert options.package_manager is PackageManagerName.NPM
        assert options.language is LanguageName.TYPESCRIPT

    def test_frozen(self, make_options):
        options = make_options()
        with pytest.raises(ValidationError):
            options.framework = "fastify"

    def test_invalid_name(self):
        with pytest.raises(ValidationError, match="lowercase"):
            ProjectOptions(name="Demo", language="typescript", framework="express")

    def test_name_with_trailing_newline(self):
        with pytest.raises(ValidationError, match="lowercase"):
            ProjectOptions(name="demo\n", language="typescript", framework="express")

    def test_catalog_from_validation_context(self):
        koa = Framework(name="koa", orms=("none",))
        catalog = OptionCatalog(
            languages={"javascript": Language(name="javascript", frameworks={"koa": koa})}
        )
        values = {"name": "demo-api", "language": "javascript", "framework": "koa"}

        options = ProjectOptions.model_validate(values, context={"catalog": catalog})
        assert options.framework == "koa"
        with pytest.raises(ValidationError, match="framework"):
            ProjectOptions.model_validate(values)

    def test_invalid_edge_is_construction_error(self):
        with pytest.raises(ValidationError, match="framework"):
            ProjectOptions(name="demo-api", language="javascript", framework="adonisjs")

    def test_database_must_match_orm(self):
        with pytest.raises(ValidationError, match="database"):
            ProjectOptions(
                name="demo-api", language="typescript", framework="express",
                orm="drizzle", database="mongodb",
            )

    def test_unknown_language(self):
        with pytest.raises(ValidationError):
            ProjectOptions(name="demo-api", language="python", framework="express")

    def test_helpers(self, make_options):
        options = make_options(
            language="javascript", framework="fastify", orm="sequelize",
            database="mysql", features={"eslint", "prettier"},
        )
        assert options.is_typescript is False
        assert options.has_database is True
        assert options.template_name == "fastify-javascript"
        assert options.has("eslint", "prettier") is True
        assert options.has("eslint", "jest") is False

    def test_summary(self, make_options):
        summary = make_options(features={"docker", "dotenv"}).summary()
        assert summary["Project"] == "demo-api"
        assert summary["Features"] == "docker, dotenv"
        assert make_options().summary()["Features"] == "(none)"
