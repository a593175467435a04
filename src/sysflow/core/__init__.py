"""Core data model: workflow schemas, variable scope and templates."""

from sysflow.core.schemas import (
    FailureKind,
    StepError,
    StepResult,
    StepStatus,
    Workflow,
    WorkflowErrorHandler,
    WorkflowResult,
    WorkflowStep,
    WorkflowTrigger,
)
from sysflow.core.scope import VariableScope
from sysflow.core.templates import expand, find_references, is_truthy

__all__ = [
    "FailureKind",
    "StepError",
    "StepResult",
    "StepStatus",
    "VariableScope",
    "Workflow",
    "WorkflowErrorHandler",
    "WorkflowResult",
    "WorkflowStep",
    "WorkflowTrigger",
    "expand",
    "find_references",
    "is_truthy",
]
