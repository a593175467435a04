"""Scaffolding for new workflow definitions."""

from sysflow.scaffold.template_render import render_workflow_template

__all__ = ["render_workflow_template"]
