"""VS Code extensions — installed one by one, failures tolerated."""

from __future__ import annotations

import logging

from devbootstrap.core.context import ProvisionContext
from devbootstrap.core.models.result import TaskResult
from devbootstrap.core.services.tasks.base import ProvisionTask

logger = logging.getLogger(__name__)


def installed_extensions(ctx: ProvisionContext) -> set[str]:
    """Lower-cased ids reported by ``code --list-extensions``."""
    r = ctx.runner.probe(["code", "--list-extensions"], timeout=120)
    if not r.ok:
        return set()
    return {line.strip().lower() for line in r.stdout.splitlines() if line.strip()}


class VSCodeExtensionsTask(ProvisionTask):
    id = "vscode"
    title = "VS Code extensions"
    best_effort = True

    def is_present(self, ctx: ProvisionContext) -> bool:
        if not ctx.runner.has("code"):
            return False
        have = installed_extensions(ctx)
        return all(ext.lower() in have for ext in ctx.settings.vscode_extensions)

    def ensure(self, ctx: ProvisionContext) -> TaskResult:
        if not ctx.runner.has("code"):
            logger.info("VS Code: 'code' is not on PATH, skipping extensions")
            return TaskResult.skipped(self.id, "'code' not on PATH")

        have = installed_extensions(ctx)
        added: list[str] = []
        failed: list[str] = []
        for ext in ctx.settings.vscode_extensions:
            if ext.lower() in have:
                logger.info("VS Code: ok (already installed) %s", ext)
                continue
            logger.info("VS Code: install %s", ext)
            r = ctx.runner.run(["code", "--install-extension", ext], check=False)
            (added if r.ok else failed).append(ext)

        details = {"installed": added, "failed": failed}
        if failed:
            logger.warning("VS Code: %d extension(s) failed: %s", len(failed), ", ".join(failed))
        if not added and not failed:
            return TaskResult.present(self.id, "all extensions installed")
        if not added:
            return TaskResult.failed(
                self.id, f"{len(failed)} extension(s) failed", details=details
            )
        return TaskResult.installed(
            self.id, f"installed {len(added)} extension(s)", details=details
        )
