"""Workflow runner with dependency injection.

WorkflowRunner drives the step executor over a workflow's steps in
order, aggregates the results and decides after each step whether to
continue or abort.
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from sysflow.config import EngineConfig
from sysflow.core.schemas import (
    FailureKind,
    StepResult,
    StepStatus,
    Workflow,
    WorkflowResult,
    WorkflowStep,
)
from sysflow.core.scope import VariableScope
from sysflow.core.templates import expand
from sysflow.engine.backends import DryRunBackend
from sysflow.engine.executor import StepExecutor
from sysflow.engine.protocols import CommandBackend
from sysflow.exceptions import WorkflowValidationError
from sysflow.validation.validator import ValidationResult, WorkflowValidator

logger = logging.getLogger(__name__)


class WorkflowRunner:
    """Executes workflows with injected dependencies.

    Separates run orchestration from:
    - Command execution (subprocess, dry run, mocks)
    - Static validation

    Execution is strictly sequential: one step's command finishes (or
    times out) before the next step's guard is evaluated.
    """

    def __init__(
        self,
        backend: CommandBackend,
        config: EngineConfig | None = None,
        validator: WorkflowValidator | None = None,
        console: Console | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize runner with dependencies.

        Args:
            backend: Command backend for real (non-dry) runs
            config: Engine settings
            validator: Validator run before every execution
            console: Where verbose progress goes (stderr by default)
            sleep: Blocking wait between retry attempts
        """
        self._backend = backend
        self._config = config or EngineConfig()
        self._validator = validator or WorkflowValidator()
        self._console = console or Console(stderr=True)
        self._sleep = sleep

    def validate(self, workflow: Workflow) -> ValidationResult:
        """Run static validation only."""
        return self._validator.validate(workflow)

    def run(
        self,
        workflow: Workflow,
        dry_run: bool = False,
        verbose: bool = False,
        workdir: Path | None = None,
        strict: bool = False,
    ) -> WorkflowResult:
        """Validate and execute a workflow.

        Args:
            workflow: Loaded workflow definition
            dry_run: Simulate every command instead of executing it
            verbose: Print expanded commands and scope state
            workdir: Working directory for step commands
            strict: Fail steps that reference unset variables

        Returns:
            WorkflowResult with one entry per step that ran or was skipped

        Raises:
            WorkflowValidationError: If validation fails; no step runs
        """
        validation = self._validator.validate(workflow)
        if not validation.valid:
            logger.warning("Workflow '%s' failed validation", workflow.name)
            raise WorkflowValidationError(workflow.name, validation.errors, validation.warnings)

        if verbose:
            for warning in validation.warnings:
                self._say(f"[yellow]Warning:[/] {escape(warning)}")

        started_at = datetime.now(timezone.utc)
        scope = VariableScope(workflow.env)
        executor = StepExecutor(
            DryRunBackend() if dry_run else self._backend,
            self._config,
            dry_run=dry_run,
            strict=strict,
            cwd=workdir,
            env=workflow.env,
            sleep=self._sleep,
        )

        logger.info("Running workflow '%s' (%d steps, dry_run=%s)", workflow.name, len(workflow.steps), dry_run)

        results: list[StepResult] = []
        error: str | None = None
        cancelled = False

        for index, step in enumerate(workflow.steps):
            if verbose:
                self._say(f"[bold]Running step:[/] {escape(step.label(index))}")

            result = executor.execute(step, scope, index)
            results.append(result)

            if verbose:
                self._report_step(result, scope)

            if not result.failed:
                continue

            if result.error is not None and result.error.kind == FailureKind.CANCELLED:
                cancelled = True
                error = f"Step '{result.name}' cancelled"
                break

            if step.continue_on_error:
                logger.info("Step '%s' failed, continuing (continue_on_error)", result.name)
                if verbose:
                    self._say(
                        f"[yellow]Step '{escape(result.name)}' failed but continuing "
                        "(continue_on_error: true)[/]"
                    )
                continue

            error = f"Step '{result.name}' failed: {result.error.message}"
            break

        success = not any(r.failed for r in results)
        if not success and error is None:
            failed = [r.name for r in results if r.failed]
            error = f"Steps failed: {', '.join(failed)}"

        handlers: list[StepResult] = []
        if not success and not cancelled and not dry_run and workflow.on_error:
            handlers = self._run_error_handlers(workflow, executor, scope, error or "")

        finished_at = datetime.now(timezone.utc)
        logger.info("Workflow '%s' finished: success=%s", workflow.name, success)

        return WorkflowResult(
            workflow=workflow.name,
            success=success,
            dry_run=dry_run,
            cancelled=cancelled,
            steps=results,
            handlers=handlers,
            error=error,
            started_at=started_at,
            finished_at=finished_at,
        )

    def _run_error_handlers(
        self,
        workflow: Workflow,
        executor: StepExecutor,
        scope: VariableScope,
        error: str,
    ) -> list[StepResult]:
        """Run on_error handlers once, with `error` bound in scope."""
        handler_scope = VariableScope(scope.as_dict())
        handler_scope.set("error", error)
        results: list[StepResult] = []

        for index, handler in enumerate(workflow.on_error):
            if handler.notify:
                message = expand(handler.notify, handler_scope)
                logger.warning("Workflow '%s': %s", workflow.name, message)
                self._say(f"[bold red]Notify:[/] {escape(message)}")
            if handler.run:
                step = WorkflowStep(name=f"on_error-{index + 1}", run=handler.run)
                results.append(executor.execute(step, handler_scope, index))

        return results

    def _report_step(self, result: StepResult, scope: VariableScope) -> None:
        if result.status == StepStatus.SKIPPED:
            self._say(f"  [dim]Skipped '{escape(result.name)}' (condition not met)[/]")
            return
        if result.command is not None:
            self._say(f"  [dim]$ {escape(result.command)}[/]")
        color = "green" if result.status == StepStatus.SUCCEEDED else "red"
        self._say(f"  [{color}]{result.status}[/] after {result.attempts} attempt(s)")
        self._say(f"  [dim]scope: {escape(repr(scope.as_dict()))}[/]")

    def _say(self, message: str) -> None:
        self._console.print(message)
