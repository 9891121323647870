"""
Preset resolver — host platform → build preset, generator and output dir.

Pure functions of (platform, source dir, manifest contents). The
manifest is re-read on every ``resolve`` call; nothing is cached.

Flow:
    platform → mapping table → preset choice
    preset + manifest → build dir (template, else build-<preset>)
    preset + manifest → build type (Visual Studio only)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from nativebuild.core.config.presets import read_manifest
from nativebuild.core.errors import UnsupportedPlatform
from nativebuild.core.models.platform import ARM64, LINUX, MACOS, WINDOWS, X64, PlatformDescriptor
from nativebuild.core.models.preset import (
    DEFAULT_BUILD_TYPE,
    DirectoryLookup,
    Generator,
    ManifestRead,
    PresetChoice,
    Resolution,
)

logger = logging.getLogger(__name__)

ANY_ARCH = "*"

_SHARED_LIBS = "-DBUILD_SHARED_LIBS=ON"

# (os family, arch) → preset. ANY_ARCH matches every architecture.
PRESET_TABLE: dict[tuple[str, str], PresetChoice] = {
    (MACOS, ANY_ARCH): PresetChoice(preset="macos-metal-node", generator=Generator.NINJA),
    (LINUX, ANY_ARCH): PresetChoice(preset="linux-opengl-node", generator=Generator.NINJA),
    (WINDOWS, ARM64): PresetChoice(
        preset="windows-arm64-opengl-node",
        generator=Generator.VISUAL_STUDIO,
        cmake_args=("-DVCPKG_TARGET_TRIPLET=arm64-windows", _SHARED_LIBS),
    ),
    (WINDOWS, X64): PresetChoice(
        preset="windows-opengl-node",
        generator=Generator.NINJA,
        cmake_args=("-DVCPKG_TARGET_TRIPLET=x64-windows", _SHARED_LIBS),
    ),
}


def select_preset(platform: PlatformDescriptor) -> PresetChoice:
    """Look up the preset for a platform.

    Raises:
        UnsupportedPlatform: If the pair has no table entry.
    """
    choice = PRESET_TABLE.get((platform.os_family, platform.arch))
    if choice is None:
        choice = PRESET_TABLE.get((platform.os_family, ANY_ARCH))
    if choice is None:
        raise UnsupportedPlatform(platform)
    return choice


# ── Build directory ──────────────────────────────────────────────────


def expand_binary_dir(template: str, source_dir: Path, preset: str) -> Path:
    """Expand the CMake preset macros we support in a ``binaryDir``.

    A result that is still relative is taken relative to the source
    directory, which is how CMake itself interprets it.
    """
    expanded = (
        template.replace("${sourceDir}", str(source_dir))
        .replace("${sourceParentDir}", str(source_dir.parent))
        .replace("${sourceDirName}", source_dir.name)
        .replace("${presetName}", preset)
    )
    path = Path(expanded)
    if not path.is_absolute():
        path = source_dir / path
    return path


def fallback_build_dir(source_dir: Path, preset: str) -> Path:
    return source_dir / f"build-{preset}"


def _encloses(build_dir: Path, source_dir: Path) -> bool:
    """True if cleaning build_dir would delete source_dir."""
    build_dir, source_dir = build_dir.resolve(), source_dir.resolve()
    return build_dir == source_dir or build_dir in source_dir.parents


def _from_manifest(
    preset: str, source_dir: Path, manifest: ManifestRead
) -> DirectoryLookup | str:
    if not manifest.ok:
        return f"Could not parse {manifest.path.name} to find binaryDir for preset \"{preset}\": {manifest.error}"
    entry = manifest.find(preset)
    if entry is None:
        return f"Preset \"{preset}\" is not defined in {manifest.path.name}"
    if not entry.binary_dir:
        return f"Preset \"{preset}\" in {manifest.path.name} has no binaryDir"
    path = expand_binary_dir(entry.binary_dir, source_dir, preset)
    if _encloses(path, source_dir):
        return (
            f"binaryDir \"{entry.binary_dir}\" of preset \"{preset}\" points at the "
            f"source tree or above it ({path}); refusing to clean it"
        )
    return DirectoryLookup(path=path, source="manifest")


def _synthesized(
    preset: str, source_dir: Path, manifest: ManifestRead
) -> DirectoryLookup | str:
    return DirectoryLookup(path=fallback_build_dir(source_dir, preset), source="fallback")


# Tried in order; a strategy returns a lookup, or a reason it declined.
_DIR_STRATEGIES: list[Callable[[str, Path, ManifestRead], DirectoryLookup | str]] = [
    _from_manifest,
    _synthesized,
]


def resolve_build_dir(preset: str, source_dir: Path, manifest: ManifestRead) -> DirectoryLookup:
    """Pick the build directory. Never raises."""
    reasons: list[str] = []
    for strategy in _DIR_STRATEGIES:
        outcome = strategy(preset, source_dir, manifest)
        if isinstance(outcome, DirectoryLookup):
            if outcome.used_fallback and reasons:
                return outcome.model_copy(update={"reason": reasons[0]})
            return outcome
        reasons.append(outcome)
    # _synthesized always answers
    raise AssertionError("no build directory strategy matched")


# ── Build type ───────────────────────────────────────────────────────


def resolve_build_type(preset: str, manifest: ManifestRead) -> str:
    """``CMAKE_BUILD_TYPE`` of the preset, or Release.

    A missing or broken manifest is already reported by the build
    directory lookup, so this defaults without a second warning.
    """
    entry = manifest.find(preset)
    if entry is None:
        logger.debug("No CMAKE_BUILD_TYPE for %s, defaulting to %s", preset, DEFAULT_BUILD_TYPE)
        return DEFAULT_BUILD_TYPE
    return entry.cache_value("CMAKE_BUILD_TYPE") or DEFAULT_BUILD_TYPE


# ── Entry point ──────────────────────────────────────────────────────


def resolve(
    platform: PlatformDescriptor,
    source_dir: Path,
    presets_path: Path | None = None,
) -> Resolution:
    """Resolve everything needed to configure and build on ``platform``.

    Args:
        platform: The target (OS family, architecture).
        source_dir: maplibre-native source directory.
        presets_path: Manifest location (default: source_dir/CMakePresets.json).

    Raises:
        UnsupportedPlatform: Before the manifest is even opened.
    """
    choice = select_preset(platform)

    if presets_path is None:
        presets_path = source_dir / "CMakePresets.json"
    manifest = read_manifest(presets_path)

    warnings: list[str] = []
    lookup = resolve_build_dir(choice.preset, source_dir, manifest)
    if lookup.used_fallback:
        message = f"{lookup.reason}; using {lookup.path}"
        logger.warning("%s", message)
        warnings.append(message)

    build_type = None
    if choice.generator.is_visual_studio:
        build_type = resolve_build_type(choice.preset, manifest)

    resolution = Resolution(
        platform=platform,
        preset=choice.preset,
        generator=choice.generator,
        source_dir=source_dir,
        build_dir=lookup.path,
        build_dir_source=lookup.source,
        cmake_args=choice.cmake_args,
        build_type=build_type,
        warnings=tuple(warnings),
    )

    logger.info("Selected preset \"%s\" for %s", resolution.preset, platform)
    logger.info("Using generator \"%s\"", resolution.generator.value)
    logger.info("Build directory \"%s\"", resolution.build_dir)
    logger.info("Additional CMake args: %s", list(resolution.cmake_args))
    return resolution
