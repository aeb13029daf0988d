"""
Shell command runner — the single place where provisioning commands run.

Every installer call (apt-get, curl, sdkmanager, dotnet, code, ...) goes
through ``CommandRunner.run``.  Read-only detection goes through
``CommandRunner.probe``, which never raises.

The runner owns the environment that child processes inherit.  Steps
that export variables or extend PATH mutate ``runner.env`` so that later
steps (and ``which`` lookups) see the new tools, exactly like a shell
script that exports as it goes.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from dataclasses import dataclass
from typing import MutableMapping, Sequence

from devbootstrap.core.errors import CommandError, MissingCommandError, format_argv

logger = logging.getLogger(__name__)

# Conventional shell exit codes for "not found" and "timed out"
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124

_DEFAULT_TIMEOUT = 1800
_PROBE_TIMEOUT = 30


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single command."""

    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout and stderr combined (some tools print versions to stderr)."""
        return (self.stdout or "") + (self.stderr or "")

    def first_line(self) -> str:
        for line in self.output.splitlines():
            if line.strip():
                return line.strip()
        return ""


class CommandRunner:
    """Run external commands with consistent logging and failure handling.

    Args:
        env: Environment mapping for child processes.  Defaults to
            ``os.environ`` so exports are visible process-wide.
        timeout: Default timeout in seconds for mutating commands.
        is_root: Override root detection (defaults to ``geteuid() == 0``).
    """

    def __init__(
        self,
        env: MutableMapping[str, str] | None = None,
        timeout: int = _DEFAULT_TIMEOUT,
        is_root: bool | None = None,
    ):
        self.env: MutableMapping[str, str] = os.environ if env is None else env
        self.timeout = timeout
        self.is_root = (os.geteuid() == 0) if is_root is None else is_root

    # ── Lookup ──────────────────────────────────────────────────

    def which(self, program: str) -> str | None:
        """Locate ``program`` on the runner's PATH."""
        return shutil.which(program, path=self.env.get("PATH", ""))

    def has(self, program: str) -> bool:
        return self.which(program) is not None

    def require(self, program: str, hint: str = "") -> str:
        """Return the path of ``program`` or raise ``MissingCommandError``."""
        path = self.which(program)
        if path is None:
            raise MissingCommandError(program, hint)
        return path

    def ensure_sudo(self) -> None:
        """Fail fast when root privileges cannot be obtained.

        Root needs nothing.  Otherwise ``sudo`` must exist; the credential
        cache is primed non-interactively and the result ignored.
        """
        if self.is_root:
            return
        self.require("sudo", "Install sudo or run as root.")
        self.probe(["sudo", "-n", "true"])

    # ── Execution ───────────────────────────────────────────────

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        sudo: bool = False,
        input_text: str | None = None,
        cwd: str | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        """Run a mutating command.

        Always logs the command.  Captured output goes to the log at
        DEBUG level.  With ``check`` a non-zero exit raises
        ``CommandError``; without it the result is returned as-is.
        """
        argv_list = list(argv)
        if sudo and not self.is_root:
            argv_list = ["sudo", *argv_list]

        logger.info("CMD %s", format_argv(argv_list))
        result = self._execute(argv_list, input_text, cwd, timeout or self.timeout)

        if result.stdout.strip():
            logger.debug("STDOUT %s", result.stdout.strip())
        if result.stderr.strip():
            logger.debug("STDERR %s", result.stderr.strip())

        if not result.ok:
            if check:
                raise CommandError(argv_list, result.returncode, result.stderr[-2000:])
            logger.info(
                "Ignoring failure (exit %d): %s", result.returncode, format_argv(argv_list)
            )
        return result

    def probe(self, argv: Sequence[str], timeout: int = _PROBE_TIMEOUT) -> CommandResult:
        """Run a read-only detection command.  Never raises."""
        argv_list = list(argv)
        logger.debug("PROBE %s", format_argv(argv_list))
        return self._execute(argv_list, None, None, timeout)

    def _execute(
        self,
        argv: list[str],
        input_text: str | None,
        cwd: str | None,
        timeout: int,
    ) -> CommandResult:
        start = time.monotonic()
        try:
            p = subprocess.run(
                argv,
                input=input_text,
                capture_output=True,
                text=True,
                cwd=cwd,
                env=dict(self.env),
                timeout=timeout,
            )
        except FileNotFoundError:
            return CommandResult(
                argv=argv,
                returncode=EXIT_NOT_FOUND,
                stderr=f"{argv[0]}: command not found",
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                argv=argv,
                returncode=EXIT_TIMEOUT,
                stderr=f"Command timed out ({timeout}s)",
                elapsed_ms=int((time.monotonic() - start) * 1000),
            )

        return CommandResult(
            argv=argv,
            returncode=p.returncode,
            stdout=p.stdout or "",
            stderr=p.stderr or "",
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )
