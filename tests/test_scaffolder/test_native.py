"""Tests for the native generator table (aspen.scaffolder.native)."""

from __future__ import annotations

from pathlib import Path

import pytest

from aspen.errors import CommandError
from aspen.options.catalog import CATALOG
from aspen.scaffolder.native import NATIVE_GENERATORS, NativeGenerator

pytestmark = pytest.mark.unit


class TestRegistry:
    def test_registered_pairs(self):
        assert set(NATIVE_GENERATORS) == {
            ("express", "typescript"), ("express", "javascript"),
            ("fastify", "typescript"), ("fastify", "javascript"),
            ("nestjs", "typescript"),
            ("hono", "typescript"), ("hono", "javascript"),
            ("adonisjs", "typescript"),
        }

    def test_every_pair_is_offered_by_catalog(self):
        for framework, language in NATIVE_GENERATORS:
            assert CATALOG.framework(language, framework) is not None, (framework, language)

    def test_is_registered(self, fake_runner):
        generator = NativeGenerator(fake_runner)
        assert generator.is_registered("express", "typescript")
        assert not generator.is_registered("adonisjs", "javascript")


class TestCommands:
    def test_express_typescript(self, fake_runner, make_options, tmp_path: Path):
        commands = NativeGenerator(fake_runner).commands(tmp_path / "demo-api", make_options())
        assert [argv for argv, _ in commands] == [
            ["npm", "init", "-y"],
            ["npm", "install", "express", "dotenv", "cors", "helmet"],
            ["npm", "install", "-D", "typescript", "@types/node", "ts-node-dev", "rimraf",
             "@types/express", "@types/cors"],
            ["npx", "tsc", "--init"],
        ]
        assert all(cwd == tmp_path / "demo-api" for _, cwd in commands)

    def test_express_javascript_has_no_typescript_steps(self, fake_runner, make_options, tmp_path):
        options = make_options(language="javascript")
        argvs = [argv for argv, _ in NativeGenerator(fake_runner).commands(tmp_path, options)]
        assert ["npx", "tsc", "--init"] not in argvs
        assert not any("-D" in argv for argv in argvs)

    def test_yarn_renders_yarn_commands(self, fake_runner, make_options, tmp_path: Path):
        options = make_options(framework="fastify", package_manager="yarn")
        argvs = [argv for argv, _ in NativeGenerator(fake_runner).commands(tmp_path, options)]
        assert argvs[0] == ["yarn", "init", "-y"]
        assert argvs[1] == ["yarn", "add", "fastify", "dotenv", "@fastify/cors"]

    def test_nestjs_runs_in_parent(self, fake_runner, make_options, tmp_path: Path):
        project_dir = tmp_path / "demo-api"
        options = make_options(framework="nestjs", package_manager="pnpm")
        [(argv, cwd)] = NativeGenerator(fake_runner).commands(project_dir, options)
        assert argv == [
            "npx", "@nestjs/cli", "new", "demo-api",
            "--package-manager", "pnpm", "--skip-git",
        ]
        assert cwd == tmp_path

    def test_hono_typescript(self, fake_runner, make_options, tmp_path: Path):
        options = make_options(framework="hono")
        [(argv, cwd)] = NativeGenerator(fake_runner).commands(tmp_path / "demo-api", options)
        assert argv == ["npm", "create", "hono@latest", "demo-api", "--", "--template", "nodejs"]
        assert cwd == tmp_path

    def test_adonisjs(self, fake_runner, make_options, tmp_path: Path):
        options = make_options(framework="adonisjs")
        [(argv, _)] = NativeGenerator(fake_runner).commands(tmp_path / "demo-api", options)
        assert argv == ["npm", "init", "adonisjs@latest", "demo-api"]


class TestGenerate:
    @pytest.mark.asyncio
    async def test_runs_every_command_with_generator_timeout(
        self, fake_runner, make_options, tmp_path: Path
    ):
        generator = NativeGenerator(fake_runner, timeout_seconds=900)
        await generator.generate(tmp_path, make_options())
        assert len(fake_runner.calls) == 4
        assert {timeout for _, _, timeout in fake_runner.calls} == {900}

    @pytest.mark.asyncio
    async def test_stops_at_first_failure(self, fake_runner, make_options, tmp_path: Path):
        fake_runner.fail_on = lambda argv: argv[:2] == ["npm", "install"]
        with pytest.raises(CommandError):
            await NativeGenerator(fake_runner).generate(tmp_path, make_options())
        assert len(fake_runner.calls) == 2
