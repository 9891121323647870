"""
Action and Receipt — what the planner asks for and what came back.

A BuildPlan is a list of Actions (clean, configure, build). The
registry hands each one to an adapter, which answers with a Receipt.
Adapters report failure through the receipt, including the tool's
exit status, rather than by raising.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

ReceiptStatus = Literal["ok", "skipped", "failed"]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """One step of a build plan."""

    id: str                         # "clean" | "configure" | "build" | "hide" | "restore"
    name: str = ""
    adapter: str                    # "command" | "filesystem"
    params: dict[str, Any] = Field(default_factory=dict)


class Receipt(BaseModel):
    """Outcome of one Action."""

    adapter: str
    action_id: str
    status: ReceiptStatus = "ok"
    output: str = ""
    error: str | None = None
    return_code: int | None = None  # exit status of the external tool
    duration_ms: int = 0
    finished_at: str = Field(default_factory=_utc_now)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **extra: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, output=output, **extra)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **extra: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **extra)

    @classmethod
    def skip(cls, adapter: str, action_id: str, reason: str = "", **extra: Any) -> Receipt:
        """A step that had nothing to do; ``reason`` lands in ``output``."""
        return cls(adapter=adapter, action_id=action_id, status="skipped", output=reason, **extra)
