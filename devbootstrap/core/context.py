"""
Provisioning context — everything a task needs for one run.

Tasks share state only through this object: the settings, the command
runner (and the environment it owns), the apt manager with its
"already updated" flag, the shell profile and the retry policy.

    - CLI:    main.py  → build_context(settings)
    - Tests:  ProvisionContext(settings=..., runner=MockRunner(...))
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from devbootstrap.adapters.shell.command import CommandRunner
from devbootstrap.core.models.settings import BootstrapSettings
from devbootstrap.core.reliability.retry import RetryPolicy
from devbootstrap.core.services.apt import AptManager
from devbootstrap.core.services.profile import ShellProfile

logger = logging.getLogger(__name__)


@dataclass
class ProvisionContext:
    """Shared state of a provisioning run."""

    settings: BootstrapSettings
    runner: CommandRunner
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    apt: AptManager = field(init=False)
    profile: ShellProfile = field(init=False)

    def __post_init__(self) -> None:
        self.apt = AptManager(self.runner, retry=self.retry)
        self.profile = ShellProfile(self.settings.profile_file)

    @property
    def env(self):
        return self.runner.env

    def export(self, name: str, value: str) -> None:
        """Set a variable for this process and every later child."""
        self.runner.env[name] = value
        logger.debug("export %s=%s", name, value)

    def prepend_path(self, *dirs: str) -> None:
        """Put ``dirs`` in front of PATH, dropping earlier duplicates."""
        current = [p for p in self.runner.env.get("PATH", "").split(os.pathsep) if p]
        new = list(dirs) + [p for p in current if p not in dirs]
        self.runner.env["PATH"] = os.pathsep.join(new)
        logger.debug("PATH=%s", self.runner.env["PATH"])


def build_context(
    settings: BootstrapSettings,
    runner: CommandRunner | None = None,
) -> ProvisionContext:
    """Create the context used by a real run."""
    runner = runner or CommandRunner()
    runner.env["DEBIAN_FRONTEND"] = "noninteractive"
    return ProvisionContext(
        settings=settings,
        runner=runner,
        retry=RetryPolicy(attempts=settings.retry_attempts, delay=settings.retry_delay),
    )
