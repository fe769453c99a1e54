"""
Mock process runner — test double for every external command.

Records each invocation and answers with success by default. Can be
configured to fail specific commands, or to run a side-effect handler
(for example, materialising a project skeleton when the create command
is invoked) so that pipelines run end to end without real tools.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from appstrap.adapters.shell.command import MANDATORY_TIMEOUT, ProcessResult
from appstrap.core.errors import ProcessError

Handler = Callable[[list[str] | str, Path | None], str | None]


@dataclass
class MockCall:
    """One recorded invocation."""

    command: list[str] | str
    cwd: Path | None
    timeout: float
    env: dict[str, str] | None

    @property
    def command_line(self) -> str:
        if isinstance(self.command, str):
            return self.command
        return " ".join(self.command)


class MockProcessRunner:
    """Drop-in replacement for ``ProcessRunner``.

    Commands are matched by prefix of their display string
    (``"git init"`` matches ``["git", "init"]``).
    """

    name = "mock"

    def __init__(
        self,
        available_tools: set[str] | None = None,
        default_output: str = "[mock] executed",
    ):
        self._available_tools = available_tools
        self._default_output = default_output
        self._failures: dict[str, tuple[int | None, str]] = {}
        self._handlers: dict[str, Handler] = {}
        self._call_log: list[MockCall] = []

    @property
    def call_log(self) -> list[MockCall]:
        """All calls this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def commands(self) -> list[str]:
        """Display strings of every recorded command, in call order."""
        return [c.command_line for c in self._call_log]

    def which(self, tool: str) -> str | None:
        if self._available_tools is None or tool in self._available_tools:
            return f"/usr/bin/{tool}"
        return None

    def set_failure(
        self,
        prefix: str,
        stderr: str = "Mock failure",
        exit_code: int | None = 1,
    ) -> None:
        """Make every command starting with *prefix* fail."""
        self._failures[prefix] = (exit_code, stderr)

    def on(self, prefix: str, handler: Handler) -> None:
        """Run *handler* when a command starting with *prefix* is invoked.

        The handler's return value (if a string) becomes stdout.
        """
        self._handlers[prefix] = handler

    def run(
        self,
        command: list[str] | str,
        cwd: Path | str | None = None,
        timeout: float = MANDATORY_TIMEOUT,
        env: dict[str, str] | None = None,
    ) -> ProcessResult:
        call = MockCall(
            command=command,
            cwd=Path(cwd) if cwd else None,
            timeout=timeout,
            env=env,
        )
        self._call_log.append(call)
        line = call.command_line

        for prefix, (exit_code, stderr) in self._failures.items():
            if line.startswith(prefix):
                raise ProcessError(command, exit_code, stderr)

        output = self._default_output
        for prefix, handler in self._handlers.items():
            if line.startswith(prefix):
                produced = handler(command, call.cwd)
                if isinstance(produced, str):
                    output = produced
                break

        return ProcessResult(command=command, stdout=output)

    def reset(self) -> None:
        """Clear call log, failures and handlers."""
        self._call_log.clear()
        self._failures.clear()
        self._handlers.clear()
