"""
Apt — install only what is missing.

Presence is checked per package with ``dpkg-query``; ``apt-get update``
runs at most once per run unless a repository was added since.
All apt-get calls run as root with ``DEBIAN_FRONTEND=noninteractive``.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Callable, Iterable

from devbootstrap.adapters.shell.command import CommandRunner
from devbootstrap.core.reliability.retry import retry as _retry

logger = logging.getLogger(__name__)

KEYRINGS_DIR = "/etc/apt/keyrings"
SOURCES_DIR = "/etc/apt/sources.list.d"

_APT_GET = ["env", "DEBIAN_FRONTEND=noninteractive", "apt-get"]


class AptManager:
    """Idempotent apt front-end bound to a command runner.

    Args:
        runner: Runner used for every command.
        retry: Retry wrapper for network downloads (signing keys).
    """

    def __init__(self, runner: CommandRunner, retry: Callable | None = None):
        self.runner = runner
        self.retry = retry or _retry
        self._updated = False

    @property
    def updated(self) -> bool:
        return self._updated

    # ── Detection ───────────────────────────────────────────────

    def is_installed(self, package: str) -> bool:
        """``dpkg-query`` reports the package as fully installed."""
        r = self.runner.probe(["dpkg-query", "-W", "-f=${Status}", package])
        return r.ok and "install ok installed" in r.stdout

    def missing(self, packages: Iterable[str]) -> list[str]:
        seen: set[str] = set()
        result: list[str] = []
        for pkg in packages:
            if pkg in seen:
                continue
            seen.add(pkg)
            if not self.is_installed(pkg):
                result.append(pkg)
        return result

    # ── Mutation ────────────────────────────────────────────────

    def invalidate(self) -> None:
        """Force the next install to refresh package lists."""
        self._updated = False

    def update_once(self, *, check: bool = True) -> bool:
        """Refresh package lists unless already attempted this run.

        With ``check=False`` a failed refresh is logged and not retried by
        later installs; they work from the existing lists.
        """
        if self._updated:
            return True
        logger.info("apt: update")
        r = self.runner.run([*_APT_GET, "update", "-y"], sudo=True, check=check)
        # A tolerated failure still counts as this run's update
        self._updated = True
        return r.ok

    def install(self, packages: Iterable[str], *, check: bool = True) -> bool:
        """Install ``packages`` unconditionally (also upgrades them).

        Returns:
            True when apt-get succeeded.
        """
        pkgs = list(packages)
        if not pkgs:
            return True
        self.update_once(check=check)
        logger.info("apt: install (%d): %s", len(pkgs), " ".join(pkgs))
        r = self.runner.run(
            [*_APT_GET, "install", "-y", "--no-install-recommends", *pkgs],
            sudo=True,
            check=check,
        )
        return r.ok

    def install_missing(self, packages: Iterable[str], *, check: bool = True) -> list[str]:
        """Install the packages that are not installed yet.

        Returns:
            The packages that were handed to apt-get (empty when all present).
        """
        self.update_once(check=check)
        pkgs = self.missing(packages)
        if not pkgs:
            logger.info("apt: ok (nothing to install)")
            return []
        if not self.install(pkgs, check=check):
            return []
        return pkgs

    def add_repository(
        self,
        *,
        keyring: str,
        list_name: str,
        key_url: str,
        source_line: str,
    ) -> None:
        """Register a signed apt repository.

        Downloads the signing key (with retry), dearmors it into
        ``/etc/apt/keyrings/<keyring>.gpg`` and writes the source line to
        ``/etc/apt/sources.list.d/<list_name>.list``.
        """
        keyring_path = f"{KEYRINGS_DIR}/{keyring}.gpg"
        list_path = f"{SOURCES_DIR}/{list_name}.list"

        self.runner.run(["mkdir", "-p", KEYRINGS_DIR], sudo=True)
        with tempfile.TemporaryDirectory(prefix="devbootstrap-key-") as tmp:
            key_file = str(Path(tmp) / f"{keyring}.key")
            self.retry(
                self.runner.run,
                ["curl", "-fsSL", "-o", key_file, key_url],
                description=f"download {key_url}",
            )
            self.runner.run(
                ["gpg", "--dearmor", "--yes", "-o", keyring_path, key_file],
                sudo=True,
            )
        self.runner.run(["tee", list_path], sudo=True, input_text=f"{source_line}\n")
        logger.info("apt: repository %s → %s", list_name, source_line)
        self.invalidate()
