"""Template rendering utilities for workflow scaffolds."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

TEMPLATES_DIR = Path(__file__).parent / "templates"

DEFAULT_DESCRIPTION = "A sysflow workflow"


def _get_environment() -> Environment:
    """Get Jinja2 environment configured for YAML templates."""
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        keep_trailing_newline=True,
        trim_blocks=False,
        lstrip_blocks=False,
    )


def render_workflow_template(name: str, description: str | None = None) -> str:
    """Render a new workflow definition.

    Args:
        name: Workflow name; a .yaml/.yml suffix is dropped
        description: Workflow description (defaults to a placeholder)

    Returns:
        YAML text of the workflow
    """
    from sysflow.discovery.workflow import WORKFLOW_SUFFIXES, sanitize_name

    stem = name
    for suffix in WORKFLOW_SUFFIXES:
        if stem.endswith(suffix):
            stem = stem[: -len(suffix)]

    env = _get_environment()
    template = env.get_template("workflow.yaml.j2")
    return template.render(  # type: ignore[no-any-return]
        name=sanitize_name(stem),
        description=description or DEFAULT_DESCRIPTION,
    )
