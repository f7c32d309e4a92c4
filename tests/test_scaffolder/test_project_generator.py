"""Tests for the scaffolding orchestrator (aspen.scaffolder.generator).

Covers:
- Non-empty target guard (nothing written, nothing run)
- Template fallback path end to end with a recording runner
- ORM/feature commands run after the skeleton exists
- Package manager availability check
"""

from __future__ import annotations

import json

import pytest

from aspen.errors import (
    CommandError,
    DirectoryNotEmptyError,
    PackageManagerUnavailableError,
    UnsupportedCombinationError,
)
from aspen.scaffolder.augmenter import ProjectAugmenter
from aspen.scaffolder.generator import ProjectGenerator
from aspen.scaffolder.materializer import TemplateMaterializer
from aspen.scaffolder.native import NativeGenerator
from aspen.scaffolder.strategy import GenerationMethod, GenerationStrategySelector

pytestmark = pytest.mark.unit


def _generator(options, runner, native_registry=None, skeleton_dir=None) -> ProjectGenerator:
    selector = GenerationStrategySelector(
        NativeGenerator(runner, registry=native_registry),
        TemplateMaterializer(skeleton_dir),
    )
    return ProjectGenerator(
        options, runner=runner, selector=selector, augmenter=ProjectAugmenter(runner)
    )


class TestDirectoryGuard:
    @pytest.mark.asyncio
    async def test_non_empty_directory_is_refused(
        self, fake_runner, make_options, tmp_project_dir
    ):
        tmp_project_dir.mkdir(parents=True)
        (tmp_project_dir / "notes.txt").write_text("keep me", encoding="utf-8")

        with pytest.raises(DirectoryNotEmptyError):
            await _generator(make_options(), fake_runner).generate(tmp_project_dir)

        assert [p.name for p in tmp_project_dir.iterdir()] == ["notes.txt"]
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_overwrite_proceeds(self, fake_runner, make_options, tmp_project_dir):
        tmp_project_dir.mkdir(parents=True)
        (tmp_project_dir / "notes.txt").write_text("keep me", encoding="utf-8")

        report = await _generator(make_options(), fake_runner, native_registry={}).generate(
            tmp_project_dir, overwrite=True
        )
        assert report.generation.success
        assert (tmp_project_dir / "notes.txt").is_file()

    @pytest.mark.asyncio
    async def test_empty_existing_directory_is_used(
        self, fake_runner, make_options, tmp_project_dir
    ):
        tmp_project_dir.mkdir(parents=True)
        report = await _generator(make_options(), fake_runner, native_registry={}).generate(
            tmp_project_dir
        )
        assert report.project_dir == tmp_project_dir


class TestGenerate:
    @pytest.mark.asyncio
    async def test_template_path(self, fake_runner, make_options, tmp_project_dir):
        options = make_options(features={"dotenv", "docker", "jest"})
        report = await _generator(options, fake_runner, native_registry={}).generate(
            tmp_project_dir
        )

        assert report.generation.method is GenerationMethod.TEMPLATE
        package = json.loads((tmp_project_dir / "package.json").read_text(encoding="utf-8"))
        assert package["name"] == "demo-api"
        assert package["scripts"]["test"] == "jest"
        assert report.scripts == package["scripts"]
        assert {p.name for p in report.files} == {
            ".env", ".env.example", ".gitignore", "Dockerfile", "docker-compose.yml",
        }
        assert (tmp_project_dir / "src" / "__tests__").is_dir()
        assert fake_runner.commands == [
            ["npm", "install", "-D", "jest", "ts-jest", "@types/jest"],
            ["npm", "install", "dotenv"],
        ]

    @pytest.mark.asyncio
    async def test_native_path(self, fake_runner, make_options, tmp_project_dir):
        report = await _generator(make_options(), fake_runner).generate(tmp_project_dir)
        assert report.generation.method is GenerationMethod.NATIVE
        assert fake_runner.commands[0] == ["npm", "init", "-y"]
        assert report.scripts is None
        assert (tmp_project_dir / "src" / "controllers").is_dir()

    @pytest.mark.asyncio
    async def test_orm_runs_after_skeleton(self, fake_runner, make_options, tmp_project_dir):
        options = make_options(orm="mongoose", database="mongodb")
        await _generator(options, fake_runner).generate(tmp_project_dir)
        commands = fake_runner.commands
        assert commands.index(["npx", "tsc", "--init"]) < commands.index(
            ["npm", "install", "mongoose"]
        )

    @pytest.mark.asyncio
    async def test_unsupported_combination(
        self, fake_runner, make_options, tmp_project_dir, skeleton_dir
    ):
        options = make_options(framework="fastify")
        with pytest.raises(UnsupportedCombinationError):
            await _generator(
                options, fake_runner, native_registry={}, skeleton_dir=skeleton_dir
            ).generate(tmp_project_dir)

    @pytest.mark.asyncio
    async def test_augment_failure_propagates(
        self, fake_runner, make_options, tmp_project_dir
    ):
        fake_runner.fail_on = lambda argv: "winston" in argv
        options = make_options(features={"winston", "docker"})
        with pytest.raises(CommandError):
            await _generator(options, fake_runner, native_registry={}).generate(tmp_project_dir)
        assert (tmp_project_dir / "package.json").is_file()
        assert not (tmp_project_dir / "Dockerfile").exists()


class TestPackageManagerCheck:
    @pytest.mark.asyncio
    async def test_missing_npm_fails_before_generation(
        self, fake_runner, make_options, tmp_project_dir
    ):
        fake_runner.available = False
        with pytest.raises(PackageManagerUnavailableError):
            await _generator(make_options(), fake_runner).generate(tmp_project_dir)
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_missing_pnpm_is_installed(self, fake_runner, make_options, tmp_project_dir):
        fake_runner.available = False
        options = make_options(package_manager="pnpm")
        await _generator(options, fake_runner, native_registry={}).generate(tmp_project_dir)
        assert fake_runner.commands[0] == ["npm", "install", "-g", "pnpm"]
