"""
Preset manifest loader — reads the native project's CMakePresets.json.

Two entry points:

    load_manifest(path)  → PresetManifest, raises ManifestUnavailable
    read_manifest(path)  → ManifestRead, never raises

The resolver only uses ``read_manifest``: a broken manifest degrades
to a synthesized build directory instead of aborting the build.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from nativebuild.core.errors import ManifestUnavailable
from nativebuild.core.models.preset import ManifestRead, PresetManifest

logger = logging.getLogger(__name__)


def load_manifest(path: Path) -> PresetManifest:
    """Load and validate a CMake presets manifest.

    Raises:
        ManifestUnavailable: If the file is missing, unreadable, not JSON,
            or does not have the expected shape.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ManifestUnavailable(f"Preset manifest not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestUnavailable(f"Cannot read {path}: {e}") from e

    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, over-long integers and runaway nesting
        raise ManifestUnavailable(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestUnavailable(
            f"Expected a JSON object in {path}, got {type(data).__name__}"
        )

    try:
        manifest = PresetManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestUnavailable(f"Unexpected preset layout in {path}: {e}") from e

    logger.debug(
        "Loaded %d configure presets from %s", len(manifest.configure_presets), path
    )
    return manifest


def read_manifest(path: Path) -> ManifestRead:
    """Read the manifest, capturing any failure in the result."""
    try:
        return ManifestRead(path=path, manifest=load_manifest(path))
    except ManifestUnavailable as e:
        return ManifestRead(path=path, error=str(e))
