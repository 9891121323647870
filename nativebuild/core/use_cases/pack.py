"""
Pack use cases — hide and restore the vendored ignore file around npm pack.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from nativebuild.adapters.registry import AdapterRegistry
from nativebuild.core.config.loader import load_settings
from nativebuild.core.errors import ConfigError
from nativebuild.core.models.action import Receipt
from nativebuild.core.services.packaging import hide_file, restore_file


@dataclass
class PackResult:
    path: Path | None = None
    receipt: Receipt | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.receipt is not None and not self.receipt.failed

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        assert self.receipt is not None
        return {
            "path": str(self.path),
            "status": self.receipt.status,
            "output": self.receipt.output,
            "error": self.receipt.error,
        }


def _run(
    restore: bool,
    config_path: Path | None,
    registry: AdapterRegistry | None,
) -> PackResult:
    result = PackResult()
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    result.path = settings.ignore_path
    helper = restore_file if restore else hide_file
    result.receipt = helper(result.path, settings.backup_suffix, registry=registry)
    return result


def run_prepack(
    config_path: Path | None = None,
    registry: AdapterRegistry | None = None,
) -> PackResult:
    """Move the ignore file aside before packaging."""
    return _run(False, config_path, registry)


def run_postpack(
    config_path: Path | None = None,
    registry: AdapterRegistry | None = None,
) -> PackResult:
    """Put the ignore file back after packaging."""
    return _run(True, config_path, registry)
