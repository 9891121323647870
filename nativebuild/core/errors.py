"""
Error taxonomy for the build orchestrator.

Only UnsupportedPlatform, UnsupportedGenerator and ExternalToolFailure
ever terminate a run. ManifestUnavailable is raised by the strict
manifest loader and converted into a warning everywhere else.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nativebuild.core.models.platform import PlatformDescriptor


class NativeBuildError(Exception):
    """Base class for all orchestrator errors."""


class ConfigError(NativeBuildError):
    """Raised when nativebuild.yml is invalid or unreadable."""


class UnsupportedPlatform(NativeBuildError):
    """The host (OS family, architecture) pair has no build preset."""

    def __init__(self, platform: PlatformDescriptor):
        self.platform = platform
        super().__init__(
            f"Unsupported OS/Architecture: {platform.os_family}/{platform.arch}"
        )


class ManifestUnavailable(NativeBuildError):
    """The preset manifest is missing, unreadable, or malformed."""


class UnsupportedGenerator(NativeBuildError):
    """A CMake generator with no known build command."""

    def __init__(self, generator: str, reason: str = ""):
        self.generator = generator
        super().__init__(reason or f"Unsupported CMake generator: {generator}")


class ExternalToolFailure(NativeBuildError):
    """An external configure or build step exited non-zero."""

    def __init__(self, step: str, command: list[str], return_code: int):
        self.step = step
        self.command = command
        self.return_code = return_code
        super().__init__(
            f"{step} failed with exit code {return_code}: {' '.join(command)}"
        )
