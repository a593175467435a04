"""Command backend implementations.

Concrete implementations of the CommandBackend protocol.
"""

import logging
import os
import signal
import subprocess
import time
from pathlib import Path

from sysflow.core.schemas import SUPPORTED_SHELLS
from sysflow.engine.protocols import CommandBackend, CommandResult
from sysflow.exceptions import CommandLaunchError

logger = logging.getLogger(__name__)

# Exit code 124 is the Unix convention for timeout (used by GNU timeout).
TIMEOUT_EXIT_CODE = 124

DRY_RUN_PREFIX = "[dry-run] would execute: "


def _as_text(stream: str | bytes | None) -> str:
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode(errors="replace")
    return stream


class SubprocessBackend(CommandBackend):
    """Run commands through a shell interpreter in a subprocess.

    Each command starts a new session so a timeout or interrupt can
    terminate the whole process group, not just the shell.
    """

    def __init__(
        self,
        shells: dict[str, list[str]] | None = None,
        kill_grace_seconds: float = 2.0,
    ) -> None:
        self.shells = shells if shells is not None else SUPPORTED_SHELLS
        self.kill_grace_seconds = kill_grace_seconds

    def run(
        self,
        command: str,
        shell: str,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute a command via the requested shell."""
        argv = self.shells.get(shell)
        if argv is None:
            raise CommandLaunchError(command, f"unsupported shell '{shell}'")

        start = time.monotonic()
        try:
            proc = subprocess.Popen(
                [*argv, command],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                cwd=cwd,
                env=env,
                start_new_session=True,
            )
        except OSError as e:
            raise CommandLaunchError(command, str(e)) from e

        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            logger.debug("Command timed out after %ss, terminating pid %d", timeout, proc.pid)
            self._terminate(proc)
            # Whatever was captured before the timeout is kept.
            stdout, stderr = self._drain(proc, e)
            return CommandResult(
                exit_code=TIMEOUT_EXIT_CODE,
                stdout=stdout,
                stderr=(stderr + "\n" if stderr else "") + f"Timeout: execution exceeded {timeout}s limit",
                duration_seconds=time.monotonic() - start,
                timed_out=True,
            )
        except KeyboardInterrupt:
            logger.debug("Interrupted, terminating pid %d", proc.pid)
            self._terminate(proc)
            raise

        return CommandResult(
            exit_code=proc.returncode,
            stdout=stdout,
            stderr=stderr,
            duration_seconds=time.monotonic() - start,
        )

    def _terminate(self, proc: subprocess.Popen[str]) -> None:
        """SIGTERM the process group, SIGKILL it if it lingers."""
        try:
            os.killpg(proc.pid, signal.SIGTERM)
        except ProcessLookupError:
            return
        try:
            proc.wait(timeout=self.kill_grace_seconds)
        except subprocess.TimeoutExpired:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except ProcessLookupError:
                return
            proc.wait()

    def _drain(
        self, proc: subprocess.Popen[str], error: subprocess.TimeoutExpired
    ) -> tuple[str, str]:
        try:
            stdout, stderr = proc.communicate(timeout=self.kill_grace_seconds)
        except (subprocess.TimeoutExpired, ValueError):
            return _as_text(error.stdout), _as_text(error.stderr)
        return _as_text(stdout), _as_text(stderr)


class DryRunBackend(CommandBackend):
    """Backend that never executes anything.

    Every command immediately reports success; stdout describes what
    would have run.
    """

    def __init__(self) -> None:
        self.commands: list[str] = []

    def run(
        self,
        command: str,
        shell: str,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        self.commands.append(command)
        return CommandResult(
            exit_code=0,
            stdout=f"{DRY_RUN_PREFIX}{command}",
            stderr="",
            duration_seconds=0.0,
        )
