"""
Resolve use case — show what a build on this host would use.

Also lists the configure presets the manifest declares, which is the
quickest way to see why a preset fell back to ``build-<preset>``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from nativebuild.core.config.loader import load_settings
from nativebuild.core.config.presets import load_manifest
from nativebuild.core.errors import ConfigError, ManifestUnavailable, UnsupportedPlatform
from nativebuild.core.models.platform import PlatformDescriptor
from nativebuild.core.models.preset import Resolution
from nativebuild.core.models.settings import BuildSettings
from nativebuild.core.services.host import detect_host
from nativebuild.core.services.resolver import resolve


@dataclass
class ResolveResult:
    """Result of resolving the preset for a platform."""

    resolution: Resolution | None = None
    platform: PlatformDescriptor | None = None
    settings: BuildSettings | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            result: dict = {"error": self.error}
            if self.platform:
                result["platform"] = self.platform.model_dump()
            return result
        assert self.resolution is not None
        return self.resolution.to_dict()


def run_resolve(
    config_path: Path | None = None,
    platform: PlatformDescriptor | None = None,
) -> ResolveResult:
    """Load settings, sample the host and resolve.

    Args:
        config_path: Optional explicit path to nativebuild.yml.
        platform: Override for the host platform (default: detected).
    """
    result = ResolveResult()

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result
    result.settings = settings

    result.platform = platform or detect_host()

    try:
        result.resolution = resolve(
            result.platform, settings.source_path, settings.presets_path
        )
    except UnsupportedPlatform as e:
        result.error = str(e)

    return result


@dataclass
class PresetsResult:
    """Configure presets declared by the manifest."""

    manifest_path: Path | None = None
    presets: list[dict] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error, "manifest": str(self.manifest_path or "")}
        return {"manifest": str(self.manifest_path), "presets": self.presets}


def list_presets(config_path: Path | None = None) -> PresetsResult:
    """Read the manifest strictly and summarise its configure presets."""
    result = PresetsResult()

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    result.manifest_path = settings.presets_path
    try:
        manifest = load_manifest(settings.presets_path)
    except ManifestUnavailable as e:
        result.error = str(e)
        return result

    result.presets = [
        {
            "name": p.name,
            "binary_dir": p.binary_dir,
            "generator": p.generator,
            "build_type": p.cache_value("CMAKE_BUILD_TYPE"),
        }
        for p in manifest.configure_presets
    ]
    return result
