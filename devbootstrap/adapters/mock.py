"""
Mock runner — universal test double for command execution.

Never spawns a process.  By default every command succeeds with empty
output.  Responses are matched by argv prefix (longest prefix wins) and
can be limited to a number of uses, so "fail twice then succeed" is a
one-liner.  Programs are "on PATH" when registered with ``available``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, MutableMapping, Sequence

from devbootstrap.adapters.shell.command import CommandResult, CommandRunner


@dataclass
class _Response:
    prefix: tuple[str, ...]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    times: int | None = None
    side_effect: Callable[[list[str]], None] | None = None


class MockRunner(CommandRunner):
    """Scripted ``CommandRunner`` for tests."""

    def __init__(
        self,
        env: MutableMapping[str, str] | None = None,
        available: Iterable[str] = (),
        is_root: bool = True,
    ):
        super().__init__(
            env=env if env is not None else {"PATH": "", "HOME": "/home/dev"},
            is_root=is_root,
        )
        self._available: set[str] = set(available)
        self._responses: list[_Response] = []
        self.call_log: list[list[str]] = []
        self.inputs: list[str | None] = []

    @property
    def call_count(self) -> int:
        return len(self.call_log)

    def make_available(self, *programs: str) -> None:
        self._available.update(programs)

    def make_unavailable(self, *programs: str) -> None:
        self._available.difference_update(programs)

    def which(self, program: str) -> str | None:
        if program in self._available:
            return f"/usr/bin/{program}"
        return super().which(program)

    def set_response(
        self,
        prefix: Sequence[str],
        *,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        times: int | None = None,
        side_effect: Callable[[list[str]], None] | None = None,
    ) -> None:
        """Script the result of every command starting with ``prefix``."""
        self._responses.append(
            _Response(tuple(prefix), returncode, stdout, stderr, times, side_effect)
        )

    def set_failure(
        self,
        prefix: Sequence[str],
        *,
        returncode: int = 1,
        stderr: str = "mock failure",
        times: int | None = None,
    ) -> None:
        self.set_response(prefix, returncode=returncode, stderr=stderr, times=times)

    def calls_matching(self, *prefix: str) -> list[list[str]]:
        """All recorded calls whose argv starts with ``prefix``."""
        n = len(prefix)
        return [argv for argv in self.call_log if tuple(argv[:n]) == prefix]

    def reset(self) -> None:
        self.call_log.clear()
        self.inputs.clear()

    def _execute(
        self,
        argv: list[str],
        input_text: str | None,
        cwd: str | None,
        timeout: int,
    ) -> CommandResult:
        self.call_log.append(list(argv))
        self.inputs.append(input_text)

        response = self._match(argv)
        if response is None:
            return CommandResult(argv=argv, returncode=0)

        if response.times is not None:
            response.times -= 1
        if response.side_effect is not None:
            response.side_effect(argv)
        return CommandResult(
            argv=argv,
            returncode=response.returncode,
            stdout=response.stdout,
            stderr=response.stderr,
        )

    def _match(self, argv: list[str]) -> _Response | None:
        best: _Response | None = None
        for response in self._responses:
            if response.times is not None and response.times <= 0:
                continue
            n = len(response.prefix)
            if tuple(argv[:n]) != response.prefix:
                continue
            if best is None or n > len(best.prefix):
                best = response
        return best
