"""Mock implementations for testing the engine layer.

Provides an in-memory command backend that can be used in tests
without subprocess side effects.
"""

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from sysflow.engine.protocols import CommandBackend, CommandResult

Outcome = CommandResult | BaseException
Responder = Callable[[str], Outcome]


def ok(stdout: str = "", stderr: str = "") -> CommandResult:
    """Successful command result."""
    return CommandResult(exit_code=0, stdout=stdout, stderr=stderr, duration_seconds=0.0)


def fail(exit_code: int = 1, stderr: str = "", stdout: str = "") -> CommandResult:
    """Failed command result."""
    return CommandResult(exit_code=exit_code, stdout=stdout, stderr=stderr, duration_seconds=0.0)


def timed_out(stdout: str = "") -> CommandResult:
    """Timed-out command result."""
    return CommandResult(
        exit_code=124,
        stdout=stdout,
        stderr="Timeout: execution exceeded limit",
        duration_seconds=0.0,
        timed_out=True,
    )


class MockBackend:
    """Mock command backend for testing.

    Records all calls without executing anything. Outcomes are taken, in
    order, from a per-command queue if one matches, then from the default
    queue; once a queue is exhausted its last outcome repeats. An outcome
    that is an exception is raised instead of returned.
    """

    def __init__(
        self,
        result: Outcome | Iterable[Outcome] | None = None,
        responder: Responder | None = None,
    ) -> None:
        """Initialize with default outcomes.

        Args:
            result: Outcome or sequence of outcomes. Defaults to success.
            responder: Callable computing the outcome from the command,
                used when no per-command queue matches.
        """
        self._default = self._as_queue(result if result is not None else ok())
        self._by_command: dict[str, list[Outcome]] = {}
        self.responder = responder
        self.calls: list[dict[str, Any]] = []

    @staticmethod
    def _as_queue(result: Outcome | Iterable[Outcome]) -> list[Outcome]:
        if isinstance(result, (CommandResult, BaseException)):
            return [result]
        return list(result)

    def on(self, command: str, *outcomes: Outcome) -> "MockBackend":
        """Script the outcomes for an exact command string."""
        self._by_command[command] = list(outcomes)
        return self

    @property
    def commands(self) -> list[str]:
        return [call["command"] for call in self.calls]

    def run(
        self,
        command: str,
        shell: str,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Record the call and return (or raise) the next outcome."""
        self.calls.append({
            "command": command,
            "shell": shell,
            "cwd": cwd,
            "env": env,
            "timeout": timeout,
        })

        if command in self._by_command:
            outcome = self._next(self._by_command[command])
        elif self.responder is not None:
            outcome = self.responder(command)
        else:
            outcome = self._next(self._default)

        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    @staticmethod
    def _next(queue: list[Outcome]) -> Outcome:
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    def reset(self) -> None:
        """Clear all recorded calls."""
        self.calls.clear()


# Verify protocol compliance at import time
assert isinstance(MockBackend(), CommandBackend)
