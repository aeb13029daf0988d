"""
Task results — the outcome contract of every provisioning task.

``ensure(task) -> installed | present | failed | skipped``.  Tasks
return results; fatal failures are raised as ``ProvisionError`` and
turned into a failed result by the engine.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

TaskStatus = Literal["installed", "present", "failed", "skipped"]


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class TaskResult(BaseModel):
    """Outcome of one provisioning task."""

    task: str
    status: TaskStatus = "present"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    message: str = ""
    error: str | None = None
    command: str | None = None       # failing command line, if any
    exit_code: int | None = None

    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the task left its tool in place (or was skipped)."""
        return self.status != "failed"

    @classmethod
    def installed(cls, task: str, message: str = "", **kwargs: Any) -> TaskResult:
        return cls(task=task, status="installed", message=message, **kwargs)

    @classmethod
    def present(cls, task: str, message: str = "", **kwargs: Any) -> TaskResult:
        return cls(task=task, status="present", message=message, **kwargs)

    @classmethod
    def skipped(cls, task: str, reason: str = "", **kwargs: Any) -> TaskResult:
        return cls(task=task, status="skipped", message=reason, **kwargs)

    @classmethod
    def failed(
        cls,
        task: str,
        error: str,
        *,
        command: str | None = None,
        exit_code: int | None = None,
        **kwargs: Any,
    ) -> TaskResult:
        return cls(
            task=task,
            status="failed",
            error=error,
            command=command,
            exit_code=exit_code,
            **kwargs,
        )
