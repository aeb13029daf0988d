"""
Sanity report — read-only version probes for every provisioned tool.

Runs ``--version`` style commands and keeps the first line of output
(stdout and stderr combined; ``java -version`` prints to stderr).
"""

from __future__ import annotations

from dataclasses import dataclass

from devbootstrap.adapters.shell.command import CommandRunner

MISSING = "missing"

# label → version command.  ``None`` means "report the path".
SANITY_PROBES: list[tuple[str, list[str] | None]] = [
    ("dotnet",     ["dotnet", "--version"]),
    ("mono",       ["mono", "--version"]),
    ("java",       ["java", "-version"]),
    ("gradle",     ["gradle", "--version"]),
    ("sdkmanager", None),
    ("adb",        ["adb", "version"]),
    ("docker",     ["docker", "--version"]),
    ("cmake",      ["cmake", "--version"]),
    ("clang",      ["clang", "--version"]),
    ("gcc",        ["gcc", "--version"]),
    ("node",       ["node", "-v"]),
    ("npm",        ["npm", "-v"]),
]


@dataclass(frozen=True)
class SanityEntry:
    tool: str
    value: str

    @property
    def missing(self) -> bool:
        return self.value == MISSING

    def to_dict(self) -> dict[str, str]:
        return {"tool": self.tool, "value": self.value}


def probe_tool(runner: CommandRunner, label: str, argv: list[str] | None) -> SanityEntry:
    if argv is None:
        return SanityEntry(label, runner.which(label) or MISSING)
    if not runner.has(argv[0]):
        return SanityEntry(label, MISSING)
    r = runner.probe(argv)
    line = r.first_line()
    if not r.ok or not line:
        return SanityEntry(label, MISSING)
    return SanityEntry(label, line)


def sanity_report(runner: CommandRunner) -> list[SanityEntry]:
    """Version of every tool, in a fixed order."""
    return [probe_tool(runner, label, argv) for label, argv in SANITY_PROBES]
