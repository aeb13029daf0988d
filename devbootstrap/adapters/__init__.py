"""Adapters — bindings to the host's shell.

Public re-exports for convenient access.
"""

from devbootstrap.adapters.mock import MockRunner
from devbootstrap.adapters.shell.command import CommandResult, CommandRunner

__all__ = [
    "CommandResult",
    "CommandRunner",
    "MockRunner",
]
