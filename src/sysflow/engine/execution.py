"""Workflow execution entry points.

This module provides the public API for running and validating
workflow files. It uses WorkflowRunner internally with the backend and
configuration wired by Container.

For custom execution strategies, use WorkflowRunner directly with an
injected CommandBackend.
"""

from pathlib import Path

from sysflow.core.schemas import Workflow, WorkflowResult
from sysflow.discovery.workflow import load_workflow
from sysflow.engine.container import Container
from sysflow.engine.protocols import CommandBackend
from sysflow.engine.runner import WorkflowRunner
from sysflow.validation.validator import ValidationResult


def get_default_runner() -> WorkflowRunner:
    """Get a WorkflowRunner with default dependencies."""
    return Container.workflow_runner()


def run_workflow(
    workflow: Workflow,
    dry_run: bool = False,
    verbose: bool = False,
    workdir: Path | None = None,
    strict: bool = False,
    backend: CommandBackend | None = None,
) -> WorkflowResult:
    """Validate and run a loaded workflow.

    Args:
        workflow: Workflow definition
        dry_run: Simulate commands instead of executing them
        verbose: Print expanded commands and scope state
        workdir: Working directory for step commands
        strict: Fail steps that reference unset variables
        backend: Command backend to use instead of the container's

    Raises:
        WorkflowValidationError: If the workflow is invalid
    """
    if backend is not None:
        runner = WorkflowRunner(backend=backend, config=Container.config())
    else:
        runner = get_default_runner()

    return runner.run(workflow, dry_run=dry_run, verbose=verbose, workdir=workdir, strict=strict)


def run_workflow_file(
    path: str | Path,
    dry_run: bool = False,
    verbose: bool = False,
    workdir: Path | None = None,
    strict: bool = False,
) -> WorkflowResult:
    """Load, validate and run a workflow file.

    Raises:
        WorkflowLoadError: If the file cannot be loaded
        WorkflowValidationError: If the workflow is invalid
    """
    workflow = load_workflow(path)
    return run_workflow(workflow, dry_run=dry_run, verbose=verbose, workdir=workdir, strict=strict)


def validate_workflow_file(path: str | Path) -> tuple[Workflow, ValidationResult]:
    """Load a workflow file and validate it without running anything.

    Raises:
        WorkflowLoadError: If the file cannot be loaded
    """
    workflow = load_workflow(path)
    return workflow, get_default_runner().validate(workflow)


__all__ = [
    "get_default_runner",
    "run_workflow",
    "run_workflow_file",
    "validate_workflow_file",
]
