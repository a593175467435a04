"""sysflow - declarative multi-step workflow runner.

Runs YAML-defined workflows of shell steps with variable passing,
conditions, retries, timeouts and dry-run simulation.
"""

from sysflow.exceptions import (
    CommandLaunchError,
    ConfigurationError,
    ExecutionError,
    SysflowError,
    TemplateError,
    ValidationError,
    WorkflowAlreadyExistsError,
    WorkflowError,
    WorkflowFileNotFoundError,
    WorkflowLoadError,
    WorkflowValidationError,
)

__version__ = "0.1.0"

__all__ = [
    # Base exception
    "SysflowError",
    # Configuration
    "ConfigurationError",
    # Workflow
    "WorkflowError",
    "WorkflowLoadError",
    "WorkflowFileNotFoundError",
    "WorkflowAlreadyExistsError",
    # Validation
    "ValidationError",
    "WorkflowValidationError",
    "TemplateError",
    # Execution
    "ExecutionError",
    "CommandLaunchError",
]
