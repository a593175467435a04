"""Workflow loading, discovery and scaffolding."""

import logging
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from sysflow.core.schemas import Workflow
from sysflow.exceptions import (
    WorkflowAlreadyExistsError,
    WorkflowFileNotFoundError,
    WorkflowLoadError,
)
from sysflow.scaffold.template_render import render_workflow_template

logger = logging.getLogger(__name__)

WORKFLOW_SUFFIXES = (".yaml", ".yml")


def _describe_validation_error(error: ValidationError) -> str:
    """Condense pydantic errors into one line per problem."""
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


def parse_workflow(content: str, source: str = "<string>") -> Workflow:
    """Parse a YAML workflow definition.

    Only the structure is checked here; semantic problems such as an
    empty step list or negative retries are left to the validator.

    Args:
        content: YAML text
        source: Path or label used in error messages

    Raises:
        WorkflowLoadError: If the YAML is invalid or not shaped like a workflow
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise WorkflowLoadError(source, f"invalid YAML: {e}") from e

    if data is None:
        raise WorkflowLoadError(source, "file is empty")
    if not isinstance(data, dict):
        raise WorkflowLoadError(source, "top-level value must be a mapping")
    if "steps" not in data:
        raise WorkflowLoadError(source, "'steps' is required")
    if not isinstance(data["steps"], list):
        raise WorkflowLoadError(source, "'steps' must be a sequence")
    for index, step in enumerate(data["steps"]):
        if not isinstance(step, dict):
            raise WorkflowLoadError(source, f"step {index + 1} must be a mapping")
        if "run" not in step:
            label = step.get("name") or f"step {index + 1}"
            raise WorkflowLoadError(source, f"'{label}' is missing 'run'")

    try:
        return Workflow.model_validate(data)
    except ValidationError as e:
        raise WorkflowLoadError(source, _describe_validation_error(e)) from e


def load_workflow(path: str | Path) -> Workflow:
    """Load a workflow definition from a YAML file.

    Raises:
        WorkflowFileNotFoundError: If the file does not exist
        WorkflowLoadError: If the file is unreadable or malformed
    """
    workflow_path = Path(path).expanduser()
    if not workflow_path.is_file():
        raise WorkflowFileNotFoundError(str(workflow_path))

    try:
        content = workflow_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise WorkflowLoadError(str(workflow_path), f"not valid UTF-8: {e}") from e
    except OSError as e:
        raise WorkflowLoadError(str(workflow_path), f"cannot read file: {e}") from e

    workflow = parse_workflow(content, source=str(workflow_path))
    logger.debug("Loaded workflow %s (%d steps) from %s", workflow.name, len(workflow.steps), workflow_path)
    return workflow


def list_workflows(directory: Path) -> list[tuple[Path, Workflow]]:
    """Load every workflow file in a directory.

    Files that fail to load are logged and skipped.

    Returns:
        (path, workflow) pairs sorted by workflow name
    """
    directory = directory.expanduser()
    if not directory.is_dir():
        return []

    workflows: list[tuple[Path, Workflow]] = []
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.suffix.lower() not in WORKFLOW_SUFFIXES:
            continue
        try:
            workflows.append((path, load_workflow(path)))
        except WorkflowLoadError as e:
            logger.warning("Failed to load workflow '%s': %s", path.name, e.reason)

    return sorted(workflows, key=lambda item: item[1].name)


def sanitize_name(name: str) -> str:
    """Normalise a workflow name: spaces become hyphens, lower case."""
    return re.sub(r"\s+", "-", name.strip()).lower()


def workflow_filename(name: str) -> str:
    """File name for a new workflow, keeping an explicit YAML suffix."""
    if name.endswith(WORKFLOW_SUFFIXES):
        return name
    return f"{name}.yaml"


def create_workflow_file(
    name: str,
    directory: Path,
    description: str | None = None,
    force: bool = False,
) -> Path:
    """Scaffold a new workflow definition file.

    Args:
        name: Workflow name (also the file name)
        directory: Directory to create the file in (created if missing)
        description: Description written into the template
        force: Overwrite an existing file

    Returns:
        Path to the created file

    Raises:
        WorkflowAlreadyExistsError: If the file exists and force is False
    """
    directory = directory.expanduser()
    output_path = directory / workflow_filename(name)
    if output_path.exists() and not force:
        raise WorkflowAlreadyExistsError(str(output_path))

    directory.mkdir(parents=True, exist_ok=True)
    content = render_workflow_template(name, description)
    output_path.write_text(content, encoding="utf-8")
    logger.debug("Created workflow file %s", output_path)
    return output_path
