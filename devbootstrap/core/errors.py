"""
Error taxonomy — every fatal condition of a provisioning run.

There is a single rule: any failure is fatal unless the call site
explicitly tolerates it (``check=False``) or the task is best effort.
Each error carries the process exit code the CLI should terminate with.
"""

from __future__ import annotations

import shlex
from typing import Sequence


def format_argv(argv: Sequence[str]) -> str:
    """Render an argv list as a copy-pasteable shell command."""
    return " ".join(shlex.quote(a) for a in argv)


class ProvisionError(Exception):
    """Base class for failures that abort a provisioning run."""

    exit_code: int = 1

    @property
    def command(self) -> str:
        """The failing command line, empty when the failure is not a command."""
        return ""


class CommandError(ProvisionError):
    """An external command exited with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = ""):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        detail = f"\n{stderr.strip()}" if stderr and stderr.strip() else ""
        super().__init__(f"Command failed ({returncode}): {self.command}{detail}")

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        return self.returncode or 1

    @property
    def command(self) -> str:
        return format_argv(self.argv)


class MissingCommandError(ProvisionError):
    """A program required by a step is not on PATH."""

    def __init__(self, program: str, hint: str = ""):
        self.program = program
        message = f"Missing command: {program}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


class ConfigError(ProvisionError):
    """Raised when settings or the task selection are invalid."""
