"""
Build settings — loaded from nativebuild.yml, or defaults.

Relative paths are anchored at ``base_dir`` (the directory holding the
config file, or the working directory when there is none).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class BuildSettings(BaseModel):
    """Where the native sources live and how to drive the build."""

    base_dir: Path = Field(default_factory=Path.cwd)
    source_dir: str = "maplibre-native"
    presets_file: str = "CMakePresets.json"
    ignore_file: str = ".npmignore"
    backup_suffix: str = ".bak"
    setup_msvc: bool = True
    env: dict[str, str] = Field(default_factory=dict)

    @property
    def source_path(self) -> Path:
        path = Path(self.source_dir)
        if not path.is_absolute():
            path = self.base_dir / path
        return path.resolve()

    @property
    def presets_path(self) -> Path:
        path = Path(self.presets_file)
        if not path.is_absolute():
            path = self.source_path / path
        return path

    @property
    def ignore_path(self) -> Path:
        return self.source_path / self.ignore_file
