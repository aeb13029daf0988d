"""
Engine executor — the provisioning loop.

Tasks run strictly in order.  A ``ProvisionError`` raised by a regular
task stops the run (fail fast); the same error from a best-effort task
is recorded and the run continues.

Flow:
    select tasks → ensure each → collect results → report
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Iterable, Sequence

from devbootstrap.core.context import ProvisionContext
from devbootstrap.core.errors import ConfigError, ProvisionError
from devbootstrap.core.models.result import TaskResult
from devbootstrap.core.services.tasks.base import ProvisionTask

logger = logging.getLogger(__name__)


@dataclass
class ProvisionReport:
    """Result of a provisioning run."""

    operation_id: str = ""
    results: list[TaskResult] = field(default_factory=list)
    fatal: TaskResult | None = None

    @property
    def total(self) -> int:
        return len(self.results)

    def count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def failed(self) -> int:
        return self.count("failed")

    @property
    def all_ok(self) -> bool:
        return self.fatal is None and self.failed == 0

    @property
    def status(self) -> str:
        if self.fatal is not None:
            return "failed"
        if self.failed:
            return "partial"
        return "ok"

    @property
    def exit_code(self) -> int:
        if self.fatal is None:
            return 0
        return self.fatal.exit_code or 1

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "status": self.status,
            "total": self.total,
            "installed": self.count("installed"),
            "present": self.count("present"),
            "skipped": self.count("skipped"),
            "failed": self.failed,
            "fatal": self.fatal.task if self.fatal else None,
            "results": [r.model_dump(mode="json") for r in self.results],
        }


@dataclass
class PlanEntry:
    """Presence check of one task."""

    task: str
    title: str
    present: bool
    best_effort: bool = False

    def to_dict(self) -> dict:
        return {
            "task": self.task,
            "title": self.title,
            "present": self.present,
            "best_effort": self.best_effort,
        }


def select_tasks(
    tasks: Sequence[ProvisionTask],
    only: Iterable[str] | None = None,
    skip: Iterable[str] | None = None,
) -> list[ProvisionTask]:
    """Filter tasks by id, preserving order.

    Raises:
        ConfigError: If ``only`` or ``skip`` names an unknown task.
    """
    known = {t.id for t in tasks}
    only_set = set(only or ())
    skip_set = set(skip or ())
    unknown = (only_set | skip_set) - known
    if unknown:
        raise ConfigError(
            f"Unknown task(s): {', '.join(sorted(unknown))}. "
            f"Available: {', '.join(t.id for t in tasks)}"
        )
    return [
        t for t in tasks
        if (not only_set or t.id in only_set) and t.id not in skip_set
    ]


def run_task(task: ProvisionTask, ctx: ProvisionContext) -> TaskResult:
    """Ensure one task, converting failures into a failed result."""
    started_at = datetime.now(UTC).isoformat()
    start = time.monotonic()
    try:
        result = task.ensure(ctx)
    except ProvisionError as e:
        result = TaskResult.failed(
            task.id,
            str(e),
            command=e.command or None,
            exit_code=e.exit_code,
        )
    except (OSError, ValueError) as e:
        # Filesystem and decoding errors (profile, SDK dir, archives)
        logger.debug("%s: %s", task.id, e, exc_info=True)
        result = TaskResult.failed(task.id, f"{type(e).__name__}: {e}", exit_code=1)
    result.started_at = started_at
    result.ended_at = datetime.now(UTC).isoformat()
    result.duration_ms = int((time.monotonic() - start) * 1000)
    return result


def run_tasks(
    tasks: Sequence[ProvisionTask],
    ctx: ProvisionContext,
    only: Iterable[str] | None = None,
    skip: Iterable[str] | None = None,
) -> ProvisionReport:
    """Run the selected tasks in order, stopping at the first fatal failure."""
    selected = select_tasks(tasks, only, skip)
    report = ProvisionReport(operation_id=generate_operation_id())

    for n, task in enumerate(selected, start=1):
        logger.info("%d) %s", n, task.title)
        result = run_task(task, ctx)
        report.results.append(result)

        status_marker = {"installed": "✓", "present": "=", "skipped": "⊘"}.get(
            result.status, "✗"
        )
        logger.info("%s %s → %s %s", status_marker, task.id, result.status, result.message)

        if result.status != "failed":
            continue
        if task.best_effort:
            logger.warning("%s failed (best effort, continuing): %s", task.id, result.error)
            continue

        report.fatal = result
        break

    return report


def plan_tasks(tasks: Sequence[ProvisionTask], ctx: ProvisionContext) -> list[PlanEntry]:
    """Presence check of every task; nothing is installed."""
    return [
        PlanEntry(
            task=t.id,
            title=t.title,
            present=t.is_present(ctx),
            best_effort=t.best_effort,
        )
        for t in tasks
    ]


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"
