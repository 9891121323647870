"""
Filesystem adapter — directory cleanup and file moves with receipts.

Missing targets are not errors here: removing a directory that does
not exist, or moving a file that is already gone, is a skipped
receipt. That keeps the clean step and the pack helpers idempotent.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from nativebuild.adapters.base import Adapter, ExecutionContext
from nativebuild.core.models.action import Receipt

logger = logging.getLogger(__name__)

_OPERATIONS = {"remove_tree", "move"}


class FilesystemAdapter(Adapter):
    """File and directory operations with receipts.

    Action params:
        operation (str): One of 'remove_tree', 'move'.
        path (str): Target path (relative to working_dir or absolute).
        dest (str): Destination path (for 'move').
    """

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True  # filesystem is always available

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"

        if operation not in _OPERATIONS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(_OPERATIONS))}"

        if not context.params.get("path"):
            return False, "Missing required param: 'path'"

        if operation == "move" and not context.params.get("dest"):
            return False, "Missing required param: 'dest' for move operation"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.params["operation"]
        target = self._resolve(context, context.params["path"])

        try:
            if operation == "remove_tree":
                return self._remove_tree(context, target)
            elif operation == "move":
                dest = self._resolve(context, context.params["dest"])
                return self._move(context, target, dest)
            else:
                return Receipt.failure(
                    adapter=self.name,
                    action_id=context.action.id,
                    error=f"Unknown operation: {operation}",
                )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Filesystem error: {e}",
                metadata={"operation": operation, "path": str(target)},
            )

    @staticmethod
    def _resolve(context: ExecutionContext, raw_path: str) -> Path:
        target = Path(raw_path)
        if not target.is_absolute():
            target = Path(context.working_dir) / target
        return target

    def _remove_tree(self, ctx: ExecutionContext, target: Path) -> Receipt:
        if not target.exists():
            return Receipt.skip(
                adapter=self.name,
                action_id=ctx.action.id,
                reason=f"{target} does not exist, skipping cleanup",
                metadata={"path": str(target)},
            )
        logger.info("Removing %s", target)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Removed {target}",
            metadata={"path": str(target)},
        )

    def _move(self, ctx: ExecutionContext, target: Path, dest: Path) -> Receipt:
        if not target.exists():
            return Receipt.skip(
                adapter=self.name,
                action_id=ctx.action.id,
                reason=f"{target} does not exist, nothing to move",
                metadata={"path": str(target), "dest": str(dest)},
            )
        target.replace(dest)
        logger.info("Moved %s -> %s", target, dest)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Moved {target} -> {dest}",
            metadata={"path": str(target), "dest": str(dest)},
        )
