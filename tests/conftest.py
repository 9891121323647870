"""
Shared test fixtures and configuration.
"""

import json
import logging
from pathlib import Path

import pytest

from nativebuild.core.models.platform import PlatformDescriptor


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """An empty maplibre-native checkout."""
    src = tmp_path / "maplibre-native"
    src.mkdir()
    return src.resolve()


@pytest.fixture
def write_presets(source_dir: Path):
    """Write a CMakePresets.json with the given configure presets."""

    def _write(*presets: dict, raw: str | None = None) -> Path:
        path = source_dir / "CMakePresets.json"
        if raw is not None:
            path.write_text(raw)
        else:
            path.write_text(json.dumps({"version": 3, "configurePresets": list(presets)}))
        return path

    return _write


@pytest.fixture
def settings_file(tmp_path: Path, source_dir: Path) -> Path:
    """A nativebuild.yml pointing at the source_dir fixture."""
    path = tmp_path / "nativebuild.yml"
    path.write_text(f"source_dir: {source_dir.name}\n")
    return path


@pytest.fixture
def linux_x64() -> PlatformDescriptor:
    return PlatformDescriptor(os_family="Linux", arch="x86_64")


@pytest.fixture
def windows_arm64() -> PlatformDescriptor:
    return PlatformDescriptor(os_family="Windows", arch="ARM64")


@pytest.fixture
def isolated_logging(monkeypatch):
    """Let setup_logging() reconfigure the root logger for one test only."""
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", list(root.handlers))
    monkeypatch.setattr(root, "level", root.level)
    monkeypatch.setattr(logging, "raiseExceptions", logging.raiseExceptions)
    return root
