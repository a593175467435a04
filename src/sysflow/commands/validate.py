"""Validate command implementation - static workflow checks."""

from sysflow.discovery.display import console, print_error, print_json, print_workflow_header
from sysflow.engine.execution import validate_workflow_file
from sysflow.exceptions import WorkflowLoadError


def validate_command(path: str, json_output: bool, errors_only: bool) -> None:
    """Validate a workflow file without running it.

    Exit Codes:
        0: Validation passed
        1: The file could not be loaded or has errors
    """
    try:
        workflow, result = validate_workflow_file(path)
    except WorkflowLoadError as e:
        if json_output:
            print_json({"valid": False, "errors": [e.message], "warnings": []})
        else:
            print_error(e.message)
        raise SystemExit(1)

    if json_output:
        output: dict = {"valid": result.valid, "errors": result.errors}
        if not errors_only:
            output["warnings"] = result.warnings
        output["workflow"] = {
            "name": workflow.name,
            "description": workflow.description or "",
            "steps": len(workflow.steps),
        }
        print_json(output)
    else:
        print_workflow_header(workflow)
        result.print(console, errors_only=errors_only)

    raise SystemExit(0 if result.valid else 1)
