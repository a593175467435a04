"""Protocols for the workflow execution engine.

Defines the contract for command backends so the step executor never
touches a subprocess directly, enabling dry runs and in-memory tests.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class CommandResult(BaseModel):
    """Result of running one command.

    Immutable once returned by a backend.
    """

    model_config = ConfigDict(frozen=True)

    exit_code: int
    stdout: str
    stderr: str
    duration_seconds: float
    timed_out: bool = False


@runtime_checkable
class CommandBackend(Protocol):
    """Protocol for command execution backends.

    Implementations run a command string and capture its streams.
    A timeout is reported as a result with timed_out=True; a command
    that cannot be started raises CommandLaunchError. On
    KeyboardInterrupt the backend terminates the process and re-raises.
    """

    def run(
        self,
        command: str,
        shell: str,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute a command and return the result."""
        ...
