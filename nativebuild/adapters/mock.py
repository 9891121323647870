"""
Mock adapter — stands in for cmake, ninja and the filesystem.

``nativebuild build --mock`` and the tests route steps here. Every
step succeeds with exit status 0 unless told otherwise with
``set_failure``; every context received is kept in ``call_log``.
"""

from __future__ import annotations

from nativebuild.adapters.base import Adapter, ExecutionContext
from nativebuild.core.models.action import Receipt


class MockAdapter(Adapter):
    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._canned: dict[str, Receipt] = {}
        self.call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        return len(self.call_log)

    def is_available(self) -> bool:
        return self._available

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        self._canned[action_id] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure", return_code: int = 1) -> None:
        """Make step ``action_id`` fail as if its tool exited with ``return_code``."""
        self.set_response(
            action_id,
            Receipt.failure(self._name, action_id, error, return_code=return_code),
        )

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self.call_log.append(context)
        canned = self._canned.get(context.action.id)
        if canned is not None:
            return canned
        return Receipt.success(
            self._name,
            context.action.id,
            self._default_output,
            return_code=0,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        self.call_log.clear()
        self._canned.clear()
