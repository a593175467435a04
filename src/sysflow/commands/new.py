"""New command implementation - scaffold a workflow file."""

from pathlib import Path

from sysflow.discovery.display import print_error, print_workflow_created
from sysflow.discovery.workflow import create_workflow_file
from sysflow.engine.container import Container
from sysflow.exceptions import WorkflowAlreadyExistsError
from sysflow.scaffold.template_render import render_workflow_template


def new_command(
    name: str,
    directory: Path | None,
    description: str | None,
    force: bool,
    to_stdout: bool,
) -> None:
    """Create a new workflow from the template.

    This function contains the business logic for the new command.
    """
    if to_stdout:
        print(render_workflow_template(name, description), end="")
        return

    output_dir = directory if directory is not None else Container.config().resolved_workflows_dir()

    try:
        path = create_workflow_file(name, output_dir, description=description, force=force)
    except WorkflowAlreadyExistsError as e:
        print_error(e.message)
        print_error("Use --force to overwrite")
        raise SystemExit(1)

    print_workflow_created(path)
