"""
Packaging helpers — hide a file before ``npm pack`` and put it back after.

The vendored maplibre-native tree ships its own ``.npmignore``, which
would make npm drop the native sources from our package. ``prepack``
moves it aside, ``postpack`` moves it back. Both are no-ops when there
is nothing to move.
"""

from __future__ import annotations

import logging
from pathlib import Path

from nativebuild.adapters.registry import AdapterRegistry, default_registry
from nativebuild.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


def backup_path(path: Path, suffix: str = ".bak") -> Path:
    return path.with_name(path.name + suffix)


def _move(action_id: str, src: Path, dest: Path, registry: AdapterRegistry | None) -> Receipt:
    registry = registry or default_registry()
    action = Action(
        id=action_id,
        adapter="filesystem",
        params={"operation": "move", "path": str(src), "dest": str(dest)},
    )
    return registry.execute_action(action, working_dir=str(src.parent))


def hide_file(
    path: Path,
    suffix: str = ".bak",
    registry: AdapterRegistry | None = None,
) -> Receipt:
    """Rename ``path`` to ``path + suffix`` if it exists."""
    receipt = _move("hide", path, backup_path(path, suffix), registry)
    if receipt.ok:
        logger.info("Temporarily moved %s", path)
    return receipt


def restore_file(
    path: Path,
    suffix: str = ".bak",
    registry: AdapterRegistry | None = None,
) -> Receipt:
    """Rename ``path + suffix`` back to ``path`` if the backup exists."""
    receipt = _move("restore", backup_path(path, suffix), path, registry)
    if receipt.ok:
        logger.info("Restored %s", path)
    return receipt
