"""Tests for static workflow validation."""

from rich.console import Console

from sysflow.core.schemas import Workflow, WorkflowStep
from sysflow.discovery.workflow import parse_workflow
from sysflow.validation import ValidationResult, WorkflowValidator


def _workflow(steps: list[dict], **fields) -> Workflow:
    return Workflow(name=fields.pop("name", "test"), steps=[WorkflowStep(**s) for s in steps], **fields)


class TestValidationResult:
    """Tests for ValidationResult formatting."""

    def test_valid_format(self) -> None:
        """Test formatting a valid result."""
        result = ValidationResult(valid=True)
        assert "Workflow is valid" in result.format()

    def test_invalid_format_lists_errors_and_warnings(self) -> None:
        """Test formatting lists errors and warnings."""
        result = ValidationResult(valid=False, errors=["bad thing"], warnings=["odd thing"])
        text = result.format()
        assert "Workflow has errors" in text
        assert "bad thing" in text
        assert "odd thing" in text

    def test_errors_only_hides_warnings(self) -> None:
        """Test errors_only hides warnings."""
        result = ValidationResult(valid=True, warnings=["odd thing"])
        assert "odd thing" not in result.format(errors_only=True)

    def test_print_to_console(self) -> None:
        """Test printing to a console."""
        console = Console(record=True, width=120)
        ValidationResult(valid=False, errors=["bad thing"]).print(console)
        assert "bad thing" in console.export_text()


class TestWorkflowValidator:
    """Tests for WorkflowValidator."""

    def setup_method(self) -> None:
        self.validator = WorkflowValidator()

    def test_minimal_workflow_is_valid(self) -> None:
        """Test a minimal workflow is valid."""
        result = self.validator.validate(_workflow([{"name": "a", "run": "echo hi"}]))
        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    def test_empty_name(self) -> None:
        """Test an empty workflow name."""
        result = self.validator.validate(_workflow([{"run": "echo"}], name="  "))
        assert not result.valid
        assert "Workflow name is required" in result.errors

    def test_no_steps(self) -> None:
        """Test a workflow with no steps."""
        result = self.validator.validate(_workflow([]))
        assert not result.valid
        assert "Workflow must have at least one step" in result.errors

    def test_empty_run(self) -> None:
        """Test a step with an empty run command."""
        result = self.validator.validate(_workflow([{"name": "a", "run": "   "}]))
        assert "Step 'a' must have a 'run' command" in result.errors

    def test_unnamed_step_is_labelled_by_position(self) -> None:
        """Test unnamed steps are labelled by position."""
        result = self.validator.validate(_workflow([{"run": "echo"}, {"run": ""}]))
        assert "Step 'step-2' must have a 'run' command" in result.errors

    def test_numeric_bounds(self) -> None:
        """Test numeric bounds on retries, delay and timeout."""
        result = self.validator.validate(
            _workflow([
                {"name": "r", "run": "echo", "retries": -1},
                {"name": "t", "run": "echo", "timeout": 0},
                {"name": "d", "run": "echo", "retry_delay": -0.5},
            ])
        )
        assert not result.valid
        assert "Step 'r' has invalid retries: -1" in result.errors
        assert "Step 't' has invalid timeout: 0.0" in result.errors
        assert "Step 'd' has invalid retry_delay: -0.5" in result.errors

    def test_zero_retries_and_delay_are_fine(self) -> None:
        """Test zero retries and delay are allowed."""
        result = self.validator.validate(
            _workflow([{"name": "a", "run": "echo", "retries": 0, "retry_delay": 0}])
        )
        assert result.valid

    def test_unknown_shell(self) -> None:
        """Test an unknown shell."""
        result = self.validator.validate(_workflow([{"name": "a", "run": "x", "shell": "fish"}]))
        assert not result.valid
        assert any("unknown shell 'fish'" in e for e in result.errors)

    def test_custom_shells(self) -> None:
        """Test custom shells from config."""
        validator = WorkflowValidator(shells={"fish": ["fish", "-c"]})
        assert validator.validate(_workflow([{"name": "a", "run": "x", "shell": "fish"}])).valid

    def test_every_error_is_reported(self) -> None:
        """Test every error is reported."""
        result = self.validator.validate(
            _workflow([
                {"name": "a", "run": ""},
                {"name": "b", "run": "echo", "retries": -2},
            ])
        )
        assert len(result.errors) == 2

    def test_duplicate_names_warn(self) -> None:
        """Test duplicate step names warn."""
        result = self.validator.validate(
            _workflow([{"name": "a", "run": "echo"}, {"name": "a", "run": "echo"}])
        )
        assert result.valid
        assert "Duplicate step name: a" in result.warnings

    def test_output_overriding_env_warns(self) -> None:
        """Test an output that overrides env warns."""
        result = self.validator.validate(
            _workflow([{"name": "a", "run": "echo", "output": "HOME_DIR"}], env={"HOME_DIR": "/x"})
        )
        assert "Step 'a' output 'HOME_DIR' overrides env variable" in result.warnings

    def test_output_that_is_not_an_identifier_warns(self) -> None:
        """Test an output that is not an identifier warns."""
        result = self.validator.validate(
            _workflow([{"name": "a", "run": "echo", "output": "my-var"}])
        )
        assert result.valid
        assert any("'my-var' cannot be referenced" in w for w in result.warnings)

    def test_undefined_reference_warns(self) -> None:
        """Test an undefined reference warns."""
        result = self.validator.validate(
            _workflow([{"name": "a", "run": "echo {{ nope }}", "when": "{{ also }}"}])
        )
        assert result.valid
        assert "Step 'a' references undefined variable 'nope' in 'run'" in result.warnings
        assert "Step 'a' references undefined variable 'also' in 'when'" in result.warnings

    def test_references_to_env_and_earlier_outputs_are_fine(self) -> None:
        """Test references to env and earlier outputs pass."""
        result = self.validator.validate(
            _workflow(
                [
                    {"name": "a", "run": "echo {{ CITY }}", "output": "x"},
                    {"name": "b", "run": "echo {{ x | upper }}"},
                ],
                env={"CITY": "Lisbon"},
            )
        )
        assert result.warnings == []

    def test_reference_to_later_output_warns(self) -> None:
        """Test a reference to a later output warns."""
        result = self.validator.validate(
            _workflow([
                {"name": "a", "run": "echo {{ x }}"},
                {"name": "b", "run": "echo", "output": "x"},
            ])
        )
        assert "Step 'a' references undefined variable 'x' in 'run'" in result.warnings

    def test_unknown_filter_warns(self) -> None:
        """Test an unknown filter warns."""
        result = self.validator.validate(_workflow([{"name": "a", "run": "{{ x | shout }}"}], env={"x": "1"}))
        assert "Step 'a' uses unknown filter 'shout'" in result.warnings

    def test_unknown_keys_warn(self) -> None:
        """Test unknown keys warn."""
        wf = parse_workflow("name: x\ncolour: blue\nsteps:\n  - name: a\n    run: echo\n    retry: 3\n")
        result = self.validator.validate(wf)
        assert result.valid
        assert "Unknown workflow keys: colour" in result.warnings
        assert "Step 'a' has unknown keys: retry" in result.warnings
