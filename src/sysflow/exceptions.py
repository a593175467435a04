"""sysflow exception hierarchy.

Provides a unified exception hierarchy for the sysflow CLI and engine.
Loader and validation errors are raised before any step runs; step-level
failures are never raised past the runner but recorded on the step result.

Usage:
    from sysflow.exceptions import WorkflowLoadError, WorkflowValidationError

    try:
        workflow = load_workflow(path)
        result = runner.run(workflow)
    except WorkflowLoadError as e:
        print(f"Cannot load {e.path}: {e.reason}")
    except WorkflowValidationError as e:
        for error in e.errors:
            print(error)
    except SysflowError as e:
        print(f"sysflow error: {e}")
"""


class SysflowError(Exception):
    """Base exception for all sysflow errors.

    All sysflow-specific exceptions inherit from this class, allowing
    callers to catch all sysflow errors with a single except clause.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# Configuration Errors


class ConfigurationError(SysflowError):
    """Error in sysflow configuration.

    Raised when config.yaml is invalid or contains incompatible settings.
    """

    pass


# Workflow Errors


class WorkflowError(SysflowError):
    """Base class for workflow-related errors."""

    pass


class WorkflowLoadError(WorkflowError):
    """Workflow definition could not be loaded.

    Raised when the file is unreadable, is not valid YAML, or does not
    have the structure of a workflow (e.g. missing steps, a step lacking run).
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load workflow {path}: {reason}")


class WorkflowFileNotFoundError(WorkflowLoadError):
    """Workflow file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(path, "file not found")
        self.message = f"Workflow file not found: {path}"
        self.args = (self.message,)


class WorkflowAlreadyExistsError(WorkflowError):
    """Workflow file already exists.

    Raised when scaffolding a workflow over an existing file without force.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File already exists: {path}")


# Validation Errors


class ValidationError(SysflowError):
    """Base class for validation errors."""

    pass


class WorkflowValidationError(ValidationError):
    """Workflow failed static validation.

    Carries every error found, not just the first, plus the warnings.
    """

    def __init__(
        self,
        workflow_name: str,
        errors: list[str],
        warnings: list[str] | None = None,
    ) -> None:
        self.workflow_name = workflow_name
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        count = len(self.errors)
        noun = "error" if count == 1 else "errors"
        super().__init__(
            f"Workflow '{workflow_name}' is invalid ({count} {noun}): " + "; ".join(self.errors)
        )


class TemplateError(SysflowError):
    """Template references variables that are not set.

    Only raised when expanding in strict mode.
    """

    def __init__(self, template: str, missing: list[str]) -> None:
        self.template = template
        self.missing = missing
        super().__init__(f"Undefined template variable(s): {', '.join(missing)}")


# Execution Errors


class ExecutionError(SysflowError):
    """Base class for execution-related errors."""

    pass


class CommandLaunchError(ExecutionError):
    """Command could not be started at all.

    Raised by command backends when the interpreter cannot be resolved
    or the process fails to spawn.
    """

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Failed to launch command: {reason}")
