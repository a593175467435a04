"""Execution engine for workflows.

This module provides workflow execution capabilities with clean architecture:

- WorkflowRunner: Drives steps in order and aggregates results
- StepExecutor: Runs one step (guard, templates, retries, timeout)
- CommandBackend: Protocol for command execution (subprocess, dry run, mocks)

For simple use cases, use the module-level functions (run_workflow_file,
validate_workflow_file). For custom execution strategies, use
WorkflowRunner with an injected backend.
"""

from sysflow.engine.backends import DryRunBackend, SubprocessBackend
from sysflow.engine.container import Container
from sysflow.engine.execution import (
    get_default_runner,
    run_workflow,
    run_workflow_file,
    validate_workflow_file,
)
from sysflow.engine.executor import StepExecutor
from sysflow.engine.protocols import CommandBackend, CommandResult
from sysflow.engine.runner import WorkflowRunner

__all__ = [
    # Core classes
    "WorkflowRunner",
    "StepExecutor",
    "Container",
    # Protocols
    "CommandBackend",
    "CommandResult",
    # Implementations
    "SubprocessBackend",
    "DryRunBackend",
    # Module-level functions
    "run_workflow",
    "run_workflow_file",
    "validate_workflow_file",
    "get_default_runner",
]
