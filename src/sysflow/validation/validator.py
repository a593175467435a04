"""Static workflow validation.

Checks a loaded workflow for semantic problems without executing
anything. Errors block execution; warnings are advisory.
"""

from collections import Counter

from pydantic import BaseModel, Field
from rich.console import Console

from sysflow.core.schemas import SUPPORTED_SHELLS, Workflow, WorkflowStep
from sysflow.core.templates import FILTERS, find_filters, find_references, is_identifier


class ValidationResult(BaseModel):
    """Result of workflow validation.

    Attributes:
        valid: Whether validation passed (no errors)
        errors: Problems that block execution
        warnings: Problems that should be addressed
    """

    valid: bool = Field(..., description="Whether validation passed")
    errors: list[str] = Field(default_factory=list, description="Errors that must be fixed")
    warnings: list[str] = Field(
        default_factory=list, description="Warnings that should be addressed"
    )

    def format(self, errors_only: bool = False) -> str:
        """Format validation result for display with Rich.

        Returns:
            Formatted string suitable for Rich console output
        """
        lines: list[str] = []

        if self.valid:
            lines.append("[green]✓[/green] Workflow is valid")
        else:
            lines.append("[red]✗[/red] Workflow has errors")

        if self.errors:
            lines.append("\n[red bold]Errors:[/red bold]")
            for error in self.errors:
                lines.append(f"  [red]•[/red] {error}")

        if self.warnings and not errors_only:
            lines.append("\n[yellow bold]Warnings:[/yellow bold]")
            for warning in self.warnings:
                lines.append(f"  [yellow]•[/yellow] {warning}")

        return "\n".join(lines)

    def print(self, console: Console | None = None, errors_only: bool = False) -> None:
        """Print formatted validation result to console."""
        (console or Console()).print(self.format(errors_only=errors_only))


class WorkflowValidator:
    """Validates workflow structure and variable references.

    Errors:
    - workflow name is empty, or there are no steps
    - a step has an empty run command
    - retries < 0, timeout <= 0, retry_delay < 0
    - unknown shell

    Warnings:
    - duplicate step names
    - output names colliding with env or unusable in templates
    - template references to variables nothing sets before the step
    - unknown template filters and unknown keys
    """

    def __init__(self, shells: dict[str, list[str]] | None = None) -> None:
        """Initialize validator.

        Args:
            shells: Supported shell names. Defaults to SUPPORTED_SHELLS.
        """
        self.shells = shells if shells is not None else SUPPORTED_SHELLS

    def validate(self, workflow: Workflow) -> ValidationResult:
        """Validate a workflow.

        Args:
            workflow: Loaded workflow definition

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[str] = []
        warnings: list[str] = []

        if not workflow.name.strip():
            errors.append("Workflow name is required")

        if not workflow.steps:
            errors.append("Workflow must have at least one step")

        if workflow.unknown_keys:
            warnings.append(f"Unknown workflow keys: {', '.join(workflow.unknown_keys)}")

        for index, step in enumerate(workflow.steps):
            step_errors, step_warnings = self._validate_step(step, index, workflow)
            errors.extend(step_errors)
            warnings.extend(step_warnings)

        warnings.extend(self._check_duplicate_names(workflow))
        warnings.extend(self._check_references(workflow))

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def _validate_step(
        self, step: WorkflowStep, index: int, workflow: Workflow
    ) -> tuple[list[str], list[str]]:
        """Validate the fields of a single step.

        Returns:
            Tuple of (errors, warnings)
        """
        errors: list[str] = []
        warnings: list[str] = []
        label = step.label(index)

        if not step.run.strip():
            errors.append(f"Step '{label}' must have a 'run' command")

        if step.retries < 0:
            errors.append(f"Step '{label}' has invalid retries: {step.retries}")

        if step.timeout is not None and step.timeout <= 0:
            errors.append(f"Step '{label}' has invalid timeout: {step.timeout}")

        if step.retry_delay is not None and step.retry_delay < 0:
            errors.append(f"Step '{label}' has invalid retry_delay: {step.retry_delay}")

        if step.shell is not None and step.shell not in self.shells:
            supported = ", ".join(sorted(self.shells))
            errors.append(f"Step '{label}' has unknown shell '{step.shell}' (supported: {supported})")

        if step.output is not None:
            if not is_identifier(step.output):
                warnings.append(
                    f"Step '{label}' output variable '{step.output}' cannot be referenced "
                    "from templates (use letters, digits and underscores)"
                )
            if step.output in workflow.env:
                warnings.append(f"Step '{label}' output '{step.output}' overrides env variable")

        for template in (step.run, step.when or ""):
            for filter_name in find_filters(template):
                if filter_name not in FILTERS:
                    warnings.append(f"Step '{label}' uses unknown filter '{filter_name}'")

        if step.unknown_keys:
            warnings.append(f"Step '{label}' has unknown keys: {', '.join(step.unknown_keys)}")

        return errors, warnings

    def _check_duplicate_names(self, workflow: Workflow) -> list[str]:
        counts = Counter(step.name for step in workflow.steps if step.name)
        return [f"Duplicate step name: {name}" for name, count in counts.items() if count > 1]

    def _check_references(self, workflow: Workflow) -> list[str]:
        """Flag variables that no env key or earlier output defines.

        Best effort: a step guarded by `when` may not set its output at
        runtime, but it still counts as defining it here.
        """
        warnings: list[str] = []
        defined = set(workflow.env)

        for index, step in enumerate(workflow.steps):
            label = step.label(index)
            for field_name, template in (("run", step.run), ("when", step.when or "")):
                for name in find_references(template):
                    if name not in defined:
                        warnings.append(
                            f"Step '{label}' references undefined variable '{name}' in '{field_name}'"
                        )
            if step.output:
                defined.add(step.output)

        return warnings
