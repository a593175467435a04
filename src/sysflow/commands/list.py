"""List command implementation."""

from pathlib import Path

from sysflow.discovery.display import print_json, print_workflow_list, workflow_summary
from sysflow.discovery.workflow import list_workflows
from sysflow.engine.container import Container


def list_command(directory: Path | None, json_output: bool, verbose: bool) -> None:
    """List the workflows in a directory.

    This function contains the business logic for the list command.
    """
    search_dir = directory if directory is not None else Container.config().resolved_workflows_dir()
    workflows = list_workflows(search_dir)

    if json_output:
        print_json([workflow_summary(path, wf) for path, wf in workflows])
    else:
        print_workflow_list(workflows, search_dir, verbose=verbose)
