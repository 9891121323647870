"""
Tests for CLI commands — resolve, build, presets, prepack/postpack.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from nativebuild.adapters.mock import MockAdapter
from nativebuild.adapters.registry import AdapterRegistry
from nativebuild.core.models.action import Receipt
from nativebuild.core.models.platform import PlatformDescriptor
from nativebuild.core.use_cases import build as build_use_case
from nativebuild.core.use_cases import resolve as resolve_use_case
from nativebuild.main import cli

pytestmark = pytest.mark.usefixtures("isolated_logging")


@pytest.fixture
def host(monkeypatch):
    """Pin the detected host for both use cases."""

    def _pin(system: str, machine: str) -> PlatformDescriptor:
        desc = PlatformDescriptor(os_family=system, arch=machine)
        monkeypatch.setattr(resolve_use_case, "detect_host", lambda: desc)
        monkeypatch.setattr(build_use_case, "detect_host", lambda: desc)
        return desc

    return _pin


@pytest.fixture
def failing_registry(monkeypatch):
    """Route `build` through a mock that fails the given step."""

    def _install(step: str, return_code: int) -> MockAdapter:
        mock = MockAdapter()
        mock.set_failure(step, error=f"{step} blew up", return_code=return_code)
        registry = AdapterRegistry()
        registry.set_mock_mode(True, mock_adapter=mock)
        monkeypatch.setattr(build_use_case, "default_registry", lambda mock_mode=False: registry)
        return mock

    return _install


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "maplibre-native" in result.output
        for command in ("build", "resolve", "presets", "prepack", "postpack"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_config(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "nope.yml"), "resolve"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestResolveCommand:
    def test_human_output(self, settings_file: Path, write_presets, host):
        write_presets({"name": "linux-opengl-node", "binaryDir": "${sourceDir}/build"})
        host("Linux", "x86_64")
        result = CliRunner().invoke(cli, ["--config", str(settings_file), "resolve"])
        assert result.exit_code == 0
        assert "linux-opengl-node" in result.output
        assert "from CMakePresets.json" in result.output

    def test_json_fallback(self, settings_file: Path, source_dir: Path, host):
        host("Windows", "ARM64")
        result = CliRunner().invoke(cli, ["--config", str(settings_file), "resolve", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["preset"] == "windows-arm64-opengl-node"
        assert data["generator"] == "Visual Studio 17 2022"
        assert data["build_dir_source"] == "fallback"
        assert data["build_type"] == "Release"
        assert Path(data["build_dir"]) == source_dir / "build-windows-arm64-opengl-node"
        assert len(data["warnings"]) == 1

    def test_unsupported_platform(self, settings_file: Path, host):
        host("SunOS", "sparc")
        result = CliRunner().invoke(cli, ["--config", str(settings_file), "resolve"])
        assert result.exit_code == 1
        assert "Unsupported OS/Architecture: sunos/sparc" in result.output


class TestBuildCommand:
    def test_mock_build_succeeds(self, settings_file: Path, write_presets, host):
        write_presets({"name": "linux-opengl-node", "binaryDir": "${sourceDir}/build"})
        host("Linux", "x86_64")
        result = CliRunner().invoke(cli, ["--config", str(settings_file), "build", "--mock"])
        assert result.exit_code == 0
        assert "build successful" in result.output
        for step in ("clean", "configure", "build"):
            assert step in result.output

    def test_dry_run_json(self, settings_file: Path, host):
        host("Darwin", "arm64")
        result = CliRunner().invoke(cli, ["--config", str(settings_file), "build", "--dry-run", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["resolution"]["preset"] == "macos-metal-node"
        assert data["report"]["skipped"] == 3
        assert "dev_environment" not in data

    def test_unsupported_platform_exits_one(self, settings_file: Path, host, failing_registry):
        host("FreeBSD", "amd64")
        mock = failing_registry("configure", 9)
        result = CliRunner().invoke(cli, ["--config", str(settings_file), "build"])
        assert result.exit_code == 1
        assert "Unsupported OS/Architecture" in result.output
        assert mock.call_count == 0

    def test_configure_failure_propagates_exit_code(self, settings_file: Path, host, failing_registry):
        host("Linux", "x86_64")
        mock = failing_registry("configure", 3)
        result = CliRunner().invoke(cli, ["--config", str(settings_file), "build"])
        assert result.exit_code == 3
        assert "Build failed at 'configure' (exit code 3)" in result.output
        assert [ctx.action.id for ctx in mock.call_log] == ["clean", "configure"]

    def test_failed_command_is_reported(self, settings_file: Path, host, monkeypatch):
        host("Linux", "x86_64")
        mock = MockAdapter()
        mock.set_response(
            "build",
            Receipt.failure(
                "command", "build", "ninja: build stopped", return_code=4,
                metadata={"argv": ["ninja", "-C", "out"]},
            ),
        )
        registry = AdapterRegistry()
        registry.set_mock_mode(True, mock_adapter=mock)
        monkeypatch.setattr(build_use_case, "default_registry", lambda mock_mode=False: registry)

        result = CliRunner().invoke(cli, ["--config", str(settings_file), "build"])

        assert result.exit_code == 4
        assert "Build failed at 'build' (exit code 4)" in result.output
        assert "Command: ninja -C out" in result.output

    def test_build_failure_json(self, settings_file: Path, host, failing_registry):
        host("Linux", "aarch64")
        failing_registry("build", 2)
        result = CliRunner().invoke(cli, ["--config", str(settings_file), "build", "--json"])
        assert result.exit_code == 2
        data = json.loads(result.stdout)
        assert data["exit_code"] == 2
        assert data["report"]["stopped_at"] == "build"

    def test_settings_env_reaches_steps(self, tmp_path: Path, source_dir: Path, host, monkeypatch):
        config = tmp_path / "nativebuild.yml"
        config.write_text(f"source_dir: {source_dir.name}\nenv:\n  CMAKE_BUILD_PARALLEL_LEVEL: '4'\n")
        host("Linux", "x86_64")
        mock = MockAdapter()
        registry = AdapterRegistry()
        registry.set_mock_mode(True, mock_adapter=mock)
        monkeypatch.setattr(build_use_case, "default_registry", lambda mock_mode=False: registry)

        result = CliRunner().invoke(cli, ["--config", str(config), "build"])

        assert result.exit_code == 0
        assert mock.call_log[1].env == {"CMAKE_BUILD_PARALLEL_LEVEL": "4"}


class TestPresetsCommand:
    def test_lists_presets(self, settings_file: Path, write_presets):
        write_presets(
            {"name": "linux-opengl-node", "binaryDir": "${sourceDir}/build"},
            {"name": "macos-metal-node"},
        )
        result = CliRunner().invoke(cli, ["--config", str(settings_file), "presets"])
        assert result.exit_code == 0
        assert "linux-opengl-node" in result.output
        assert "(no binaryDir)" in result.output

    def test_missing_manifest(self, settings_file: Path):
        result = CliRunner().invoke(cli, ["--config", str(settings_file), "presets", "--json"])
        assert result.exit_code == 1
        assert "not found" in json.loads(result.stdout)["error"]


class TestPackCommands:
    def test_prepack_and_postpack(self, settings_file: Path, source_dir: Path):
        ignore = source_dir / ".npmignore"
        ignore.write_text("*\n")
        runner = CliRunner()

        result = runner.invoke(cli, ["--config", str(settings_file), "prepack"])
        assert result.exit_code == 0
        assert not ignore.exists()

        result = runner.invoke(cli, ["--config", str(settings_file), "postpack"])
        assert result.exit_code == 0
        assert ignore.read_text() == "*\n"

    def test_postpack_without_backup(self, settings_file: Path):
        result = CliRunner().invoke(cli, ["--config", str(settings_file), "postpack", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["status"] == "skipped"
