"""
Adapter registry — dispatches build steps to the adapter that runs them.

The planner only produces Actions; the registry decides who executes
them. In mock mode every step goes to a mock (cmake is never run),
and a dry run reports each step as skipped without touching anything.
"""

from __future__ import annotations

import logging
import time

from nativebuild.adapters.base import Adapter, ExecutionContext
from nativebuild.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Adapters by name, plus the mock and dry-run switches."""

    def __init__(self, mock_mode: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._mock_mode = mock_mode
        self._mock_adapter: Adapter | None = None

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def set_mock_mode(self, enabled: bool, mock_adapter: Adapter | None = None) -> None:
        """Route every step to ``mock_adapter`` (or a canned success)."""
        self._mock_mode = enabled
        self._mock_adapter = mock_adapter

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter %r", adapter.name)
        self._adapters[adapter.name] = adapter

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def names(self) -> list[str]:
        return sorted(self._adapters)

    def execute_action(
        self,
        action: Action,
        working_dir: str = ".",
        env: dict[str, str] | None = None,
        dry_run: bool = False,
    ) -> Receipt:
        """Run one step and return its receipt. Never raises.

        Order: pick adapter → dry-run short cut → availability → validate → execute.
        """
        started = time.monotonic()

        if self._mock_mode and self._mock_adapter is None:
            return Receipt.success(
                adapter=action.adapter,
                action_id=action.id,
                output=f"[mock] {action.adapter}:{action.id} executed",
                return_code=0,
                metadata={"mock": True, "dry_run": dry_run},
            )

        adapter = self._mock_adapter if self._mock_mode else self._adapters.get(action.adapter)
        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        if dry_run:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] Would execute {action.adapter}:{action.id}",
                metadata={"dry_run": True, "params": action.params},
            )

        if not adapter.is_available():
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Adapter '{adapter.name}' is not available",
            )

        context = ExecutionContext(action=action, working_dir=working_dir, env=env or {})

        valid, problem = adapter.validate(context)
        if not valid:
            logger.debug("Step %s rejected by %s: %s", action.id, adapter.name, problem)
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {problem}",
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised while running %s: %s", adapter.name, action.id, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = receipt.duration_ms or int((time.monotonic() - started) * 1000)
        return receipt


def default_registry(mock_mode: bool = False) -> AdapterRegistry:
    """Registry with the command and filesystem adapters."""
    from nativebuild.adapters.shell.command import CommandAdapter
    from nativebuild.adapters.shell.filesystem import FilesystemAdapter

    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(CommandAdapter())
    registry.register(FilesystemAdapter())
    return registry
