"""
Preset models — the manifest we read and the resolution we produce.

The manifest side mirrors the parts of ``CMakePresets.json`` we care
about (``configurePresets[].binaryDir`` and ``cacheVariables``).
Everything else in the document is ignored. The resolution side is
what the build engine consumes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from nativebuild.core.models.platform import PlatformDescriptor

DEFAULT_BUILD_TYPE = "Release"


class Generator(StrEnum):
    """CMake generators the orchestrator knows how to drive."""

    NINJA = "Ninja"
    VISUAL_STUDIO = "Visual Studio 17 2022"
    MAKEFILES = "Unix Makefiles"
    XCODE = "Xcode"

    @property
    def is_visual_studio(self) -> bool:
        return "visual studio" in self.value.lower()


# ── Manifest (external, read-only) ───────────────────────────────────


class ConfigurePreset(BaseModel):
    """One entry of ``configurePresets``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    binary_dir: str | None = Field(default=None, alias="binaryDir")
    generator: str | None = None
    inherits: str | list[str] | None = None
    cache_variables: dict[str, Any] = Field(default_factory=dict, alias="cacheVariables")

    def cache_value(self, key: str) -> str | None:
        """Return a cache variable as a string.

        CMake allows either a plain value or ``{"type": ..., "value": ...}``.
        """
        raw = self.cache_variables.get(key)
        if isinstance(raw, dict):
            raw = raw.get("value")
        if raw is None or raw == "":
            return None
        if isinstance(raw, bool):
            return "ON" if raw else "OFF"
        return str(raw)


class PresetManifest(BaseModel):
    """The subset of ``CMakePresets.json`` used for resolution."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version: int | None = None
    configure_presets: list[ConfigurePreset] = Field(
        default_factory=list, alias="configurePresets"
    )

    def get(self, name: str) -> ConfigurePreset | None:
        for preset in self.configure_presets:
            if preset.name == name:
                return preset
        return None

    def names(self) -> list[str]:
        return [p.name for p in self.configure_presets]


@dataclass(frozen=True)
class ManifestRead:
    """Tagged outcome of reading the manifest: a manifest or an error."""

    path: Path
    manifest: PresetManifest | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.manifest is not None

    def find(self, name: str) -> ConfigurePreset | None:
        if self.manifest is None:
            return None
        return self.manifest.get(name)


# ── Resolution (produced per invocation) ─────────────────────────────


class PresetChoice(BaseModel):
    """A row of the platform → preset mapping table."""

    model_config = ConfigDict(frozen=True)

    preset: str
    generator: Generator
    cmake_args: tuple[str, ...] = ()


class DirectoryLookup(BaseModel):
    """Where the build output goes, and which strategy decided it."""

    model_config = ConfigDict(frozen=True)

    path: Path
    source: Literal["manifest", "fallback"]
    reason: str | None = None

    @property
    def used_fallback(self) -> bool:
        return self.source == "fallback"


class Resolution(BaseModel):
    """Everything the build engine needs for one invocation."""

    model_config = ConfigDict(frozen=True)

    platform: PlatformDescriptor
    preset: str
    generator: Generator
    source_dir: Path
    build_dir: Path
    build_dir_source: Literal["manifest", "fallback"]
    cmake_args: tuple[str, ...] = ()
    build_type: str | None = None
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
