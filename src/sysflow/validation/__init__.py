"""Workflow validation.

Static checks over loaded workflow definitions.
"""

from sysflow.validation.validator import ValidationResult, WorkflowValidator

__all__ = [
    "ValidationResult",
    "WorkflowValidator",
]
