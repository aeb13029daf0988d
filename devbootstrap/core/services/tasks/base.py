"""
Task base — the contract between the engine and each provisioning step.

Every task answers two questions: "is the tool already here?" and
"install it".  The engine only talks to tasks through this interface.

To create a new task:
    1. Subclass ProvisionTask
    2. Set id, title (and best_effort if failures must not abort the run)
    3. Implement is_present and install, or override ensure
    4. Add it to ``tasks.default_tasks``
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from devbootstrap.core.context import ProvisionContext
from devbootstrap.core.models.result import TaskResult


class ProvisionTask(ABC):
    """Abstract base class for provisioning tasks.

    Fatal failures are raised (``ProvisionError``); the engine turns
    them into a failed ``TaskResult``.
    """

    id: str = ""
    title: str = ""
    best_effort: bool = False

    @abstractmethod
    def is_present(self, ctx: ProvisionContext) -> bool:
        """Read-only presence check.  Must not mutate the host."""

    def install(self, ctx: ProvisionContext) -> str:
        """Install the tool.  Returns a short summary for the result.

        Optional hook: only the default ``ensure`` calls it, so tasks that
        override ``ensure`` need not implement it.
        """
        raise NotImplementedError

    def ensure(self, ctx: ProvisionContext) -> TaskResult:
        """Install the tool unless it is already present."""
        if self.is_present(ctx):
            return TaskResult.present(self.id, f"{self.title}: already present")
        message = self.install(ctx)
        return TaskResult.installed(self.id, message)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id!r}>"


class AptPackagesTask(ProvisionTask):
    """A task that is nothing more than a list of apt packages."""

    packages: tuple[str, ...] = ()

    def package_list(self, ctx: ProvisionContext) -> list[str]:
        return list(self.packages)

    def is_present(self, ctx: ProvisionContext) -> bool:
        return not ctx.apt.missing(self.package_list(ctx))

    def ensure(self, ctx: ProvisionContext) -> TaskResult:
        installed = ctx.apt.install_missing(self.package_list(ctx))
        if not installed:
            return TaskResult.present(self.id, f"{self.title}: all packages installed")
        return TaskResult.installed(
            self.id,
            f"installed {len(installed)} package(s)",
            details={"packages": installed},
        )
