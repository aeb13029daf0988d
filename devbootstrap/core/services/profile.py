"""
Shell profile — append-once configuration lines.

Writes are IDEMPOTENT: a line is appended only when the profile does not
already contain it (fixed-string match), so re-running a provisioning
run never duplicates exports.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

MARKER = "# Added by devbootstrap"


def export_line(name: str, value: str) -> str:
    """``export NAME="value"`` (value is written verbatim)."""
    return f'export {name}="{value}"'


def path_line(*entries: str) -> str:
    """``export PATH="a:b:$PATH"``."""
    return f'export PATH="{":".join(entries)}:$PATH"'


class ShellProfile:
    """A POSIX shell rc file (``~/.bashrc`` by default)."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> str:
        if not self.path.is_file():
            return ""
        # Foreign bytes must not stop a fixed-string match
        return self.path.read_text(encoding="utf-8", errors="surrogateescape")

    def contains(self, line: str) -> bool:
        return line in self.read()

    def append_once(self, line: str) -> bool:
        """Append ``line`` unless present.  Returns True when written."""
        return bool(self.ensure_lines([line]))

    def ensure_lines(self, lines: Iterable[str]) -> list[str]:
        """Append every line not yet present, under a marker comment.

        Returns:
            The lines actually written (empty when all were present).
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)

        existing = self.read()
        new_lines: list[str] = []
        for line in lines:
            if line.strip() and line not in existing and line not in new_lines:
                new_lines.append(line)

        if not new_lines:
            return []

        with self.path.open("a", encoding="utf-8", errors="surrogateescape") as f:
            if existing and not existing.endswith("\n"):
                f.write("\n")
            f.write(f"\n{MARKER}\n")
            for line in new_lines:
                f.write(f"{line}\n")

        for line in new_lines:
            logger.info("profile: %s += %s", self.path, line)
        return new_lines
