"""
Platform descriptor — the (OS family, architecture) pair of the host.

Captured once at the entry point and passed explicitly into the
resolver. Names are normalised so that ``Darwin``/``darwin`` become
``macos`` and ``x86_64``/``AMD64`` become ``x64``; anything unknown
keeps its lower-cased raw name so error messages stay useful.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

MACOS = "macos"
LINUX = "linux"
WINDOWS = "windows"

X64 = "x64"
ARM64 = "arm64"

_OS_ALIASES = {
    "darwin": MACOS,
    "macos": MACOS,
    "linux": LINUX,
    "linux2": LINUX,
    "windows": WINDOWS,
    "win32": WINDOWS,
}

_ARCH_ALIASES = {
    "x86_64": X64,
    "amd64": X64,
    "x64": X64,
    "aarch64": ARM64,
    "arm64": ARM64,
}


def normalize_os_family(name: str) -> str:
    """Map a raw system name to an OS family."""
    key = name.strip().lower()
    return _OS_ALIASES.get(key, key)


def normalize_arch(name: str) -> str:
    """Map a raw machine name to an architecture."""
    key = name.strip().lower()
    return _ARCH_ALIASES.get(key, key)


class PlatformDescriptor(BaseModel):
    """Immutable (OS family, architecture) pair."""

    model_config = ConfigDict(frozen=True)

    os_family: str
    arch: str

    @field_validator("os_family")
    @classmethod
    def _norm_os(cls, v: str) -> str:
        return normalize_os_family(v)

    @field_validator("arch")
    @classmethod
    def _norm_arch(cls, v: str) -> str:
        return normalize_arch(v)

    def __str__(self) -> str:
        return f"{self.os_family}/{self.arch}"
