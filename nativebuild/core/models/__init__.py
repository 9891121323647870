"""
Domain models — Pydantic types for the build orchestrator.

    from nativebuild.core.models import PlatformDescriptor, Resolution, Action, Receipt
"""

from nativebuild.core.models.action import Action, Receipt
from nativebuild.core.models.platform import PlatformDescriptor
from nativebuild.core.models.preset import (
    ConfigurePreset,
    DirectoryLookup,
    Generator,
    ManifestRead,
    PresetChoice,
    PresetManifest,
    Resolution,
)
from nativebuild.core.models.settings import BuildSettings

__all__ = [
    "Action",
    "BuildSettings",
    "ConfigurePreset",
    "DirectoryLookup",
    "Generator",
    "ManifestRead",
    "PlatformDescriptor",
    "PresetChoice",
    "PresetManifest",
    "Receipt",
    "Resolution",
]
