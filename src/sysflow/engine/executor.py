"""Step executor: runs a single workflow step.

A step moves through pending -> skipped, or pending -> running ->
succeeded/failed. Retries are per step, so a transient failure never
re-runs earlier steps.
"""

import functools
import logging
import os
import time
from collections.abc import Callable
from pathlib import Path

from tenacity import RetryCallState, Retrying, retry_if_result, stop_after_attempt, wait_fixed

from sysflow.config import EngineConfig
from sysflow.core.schemas import FailureKind, StepError, StepResult, StepStatus, WorkflowStep
from sysflow.core.scope import VariableScope
from sysflow.core.templates import expand, is_truthy
from sysflow.engine.protocols import CommandBackend, CommandResult
from sysflow.exceptions import CommandLaunchError, TemplateError

logger = logging.getLogger(__name__)


def _tail(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[-limit:]


def _log_retry(step_name: str, retry_state: RetryCallState) -> None:
    """Log a failed attempt before tenacity sleeps and retries."""
    _, failure = retry_state.outcome.result()  # type: ignore[union-attr]
    logger.info(
        "Step '%s' attempt %d failed: %s; retrying",
        step_name,
        retry_state.attempt_number,
        failure.message,
    )


class StepExecutor:
    """Executes steps against a command backend.

    The executor owns the attempt loop: guard evaluation, template
    expansion, retries with delay, and capturing output into the scope.
    """

    def __init__(
        self,
        backend: CommandBackend,
        config: EngineConfig | None = None,
        *,
        dry_run: bool = False,
        strict: bool = False,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize executor.

        Args:
            backend: Command backend used for every attempt
            config: Engine settings (default shell, retry delay, output limit)
            dry_run: Do not capture step output into the scope
            strict: Fail steps that reference unset variables
            cwd: Working directory for commands
            env: Extra environment variables layered over the process env
            sleep: Blocking wait between attempts
            clock: Monotonic clock used for durations
        """
        self.backend = backend
        self.config = config or EngineConfig()
        self.dry_run = dry_run
        self.strict = strict
        self.cwd = cwd
        self.env = {**os.environ, **(env or {})}
        self._sleep = sleep
        self._clock = clock
        # Outputs a dry run would have captured; strict expansion treats them as set.
        self._simulated_outputs: set[str] = set()

    def execute(self, step: WorkflowStep, scope: VariableScope, index: int = 0) -> StepResult:
        """Run one step and return its result.

        Args:
            step: Step definition
            scope: Variables visible to the step; updated with its output
            index: Position of the step, used to label unnamed steps
        """
        name = step.label(index)
        start = self._clock()

        if step.when is not None:
            try:
                guard = expand(step.when, scope, strict=self.strict, pending=self._simulated_outputs)
            except TemplateError as e:
                return self._template_failure(name, e, start)
            if not is_truthy(guard):
                logger.debug("Skipping step '%s': condition %r is false", name, guard)
                return StepResult(name=name, status=StepStatus.SKIPPED)

        try:
            command = expand(step.run, scope, strict=self.strict, pending=self._simulated_outputs)
        except TemplateError as e:
            return self._template_failure(name, e, start)

        max_attempts = max(step.retries, 0) + 1
        delay = step.retry_delay if step.retry_delay is not None else self.config.default_retry_delay
        shell = step.shell or self.config.default_shell

        attempts = 0

        def attempt() -> tuple[CommandResult | None, StepError | None]:
            nonlocal attempts
            attempts += 1
            logger.debug("Step '%s' attempt %d/%d: %s", name, attempts, max_attempts, command)
            return self._attempt(command, shell, step.timeout)

        retrying = Retrying(
            stop=stop_after_attempt(max_attempts),
            wait=wait_fixed(delay),
            retry=retry_if_result(lambda outcome: outcome[1] is not None),
            before_sleep=functools.partial(_log_retry, name),
            retry_error_callback=lambda state: state.outcome.result(),  # type: ignore[union-attr]
            sleep=self._sleep,
        )

        try:
            last, failure = retrying(attempt)
        except KeyboardInterrupt:
            logger.warning("Step '%s' cancelled by interrupt", name)
            return StepResult(
                name=name,
                status=StepStatus.FAILED,
                duration_ms=self._elapsed_ms(start),
                attempts=attempts,
                command=command,
                error=StepError(kind=FailureKind.CANCELLED, message="Cancelled by interrupt"),
            )

        stdout = last.stdout if last else ""
        # A launch failure has no process output; its reason stands in for stderr.
        stderr = last.stderr if last else (failure.message if failure else "")
        limit = self.config.max_output_chars

        if failure is None:
            if step.output and self.dry_run:
                self._simulated_outputs.add(step.output)
            elif step.output:
                scope.set(step.output, stdout.strip())
            return StepResult(
                name=name,
                status=StepStatus.SUCCEEDED,
                duration_ms=self._elapsed_ms(start),
                attempts=attempts,
                command=command,
                exit_code=last.exit_code if last else 0,
                stdout=_tail(stdout, limit),
                stderr=_tail(stderr, limit),
            )

        return StepResult(
            name=name,
            status=StepStatus.FAILED,
            duration_ms=self._elapsed_ms(start),
            attempts=attempts,
            command=command,
            exit_code=last.exit_code if last else None,
            stdout=_tail(stdout, limit),
            stderr=_tail(stderr, limit),
            error=failure,
        )

    def _attempt(
        self, command: str, shell: str, timeout: float | None
    ) -> tuple[CommandResult | None, StepError | None]:
        """Run one attempt; the error is None when it succeeded."""
        try:
            result = self.backend.run(command, shell, cwd=self.cwd, env=self.env, timeout=timeout)
        except CommandLaunchError as e:
            return None, StepError(kind=FailureKind.LAUNCH, message=e.reason)

        if result.timed_out:
            return result, StepError(
                kind=FailureKind.TIMEOUT,
                message=f"Timed out after {timeout}s",
                exit_code=result.exit_code,
            )
        if result.exit_code != 0:
            return result, StepError(
                kind=FailureKind.EXIT,
                message=f"Command exited with code {result.exit_code}",
                exit_code=result.exit_code,
            )
        return result, None

    def _template_failure(
        self, name: str, error: TemplateError, start: float
    ) -> StepResult:
        return StepResult(
            name=name,
            status=StepStatus.FAILED,
            duration_ms=self._elapsed_ms(start),
            attempts=0,
            error=StepError(kind=FailureKind.TEMPLATE, message=error.message),
        )

    def _elapsed_ms(self, start: float) -> int:
        return int((self._clock() - start) * 1000)
