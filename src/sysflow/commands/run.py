"""Run command implementation."""

from pathlib import Path

from sysflow.discovery.display import (
    console,
    print_error,
    print_info,
    print_json,
    print_run_result,
    print_warning,
)
from sysflow.discovery.workflow import load_workflow
from sysflow.engine.execution import run_workflow
from sysflow.exceptions import WorkflowLoadError, WorkflowValidationError
from sysflow.validation.validator import ValidationResult

# Conventional exit status for a process stopped by SIGINT.
CANCELLED_EXIT_CODE = 130


def run_command(
    path: str,
    dry_run: bool,
    verbose: bool,
    json_output: bool,
    workdir: Path | None,
    strict: bool,
) -> None:
    """Run a workflow file.

    This function contains the business logic for the run command.
    The CLI layer (cli.py) handles argument parsing and delegates here.

    Exit Codes:
        0: Every step succeeded or was skipped
        1: Load, validation or step failure
        130: Cancelled by interrupt
    """
    if workdir is not None and not workdir.is_dir():
        print_error(f"Working directory not found: {workdir}")
        raise SystemExit(1)

    try:
        workflow = load_workflow(path)
    except WorkflowLoadError as e:
        if json_output:
            print_json({"success": False, "errors": [e.message], "warnings": []})
        else:
            print_error(e.message)
        raise SystemExit(1)

    if not json_output:
        print_info(f"Running workflow: {workflow.name}")
        if dry_run:
            print_warning("Dry run: commands are not executed and step outputs stay empty")

    try:
        result = run_workflow(
            workflow,
            dry_run=dry_run,
            verbose=verbose,
            workdir=workdir,
            strict=strict,
        )
    except WorkflowValidationError as e:
        if json_output:
            print_json({"success": False, "errors": e.errors, "warnings": e.warnings})
        else:
            ValidationResult(valid=False, errors=e.errors, warnings=e.warnings).print(console)
        raise SystemExit(1)

    if json_output:
        print_json(result.model_dump(mode="json"))
    else:
        print_run_result(result, verbose=verbose)

    if result.cancelled:
        raise SystemExit(CANCELLED_EXIT_CODE)
    raise SystemExit(0 if result.success else 1)
