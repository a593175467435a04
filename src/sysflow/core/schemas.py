"""Pydantic schemas for sysflow workflows and run results."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

SUPPORTED_SHELLS: dict[str, list[str]] = {
    "bash": ["bash", "-c"],
    "sh": ["sh", "-c"],
    "zsh": ["zsh", "-c"],
    "python": ["python3", "-c"],
}


class StepStatus(str, Enum):
    """Final state of a step."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class FailureKind(str, Enum):
    """Why a step failed."""

    EXIT = "exit"  # Non-zero exit code
    TIMEOUT = "timeout"  # Attempt exceeded its timeout
    LAUNCH = "launch"  # Process could not be started
    CANCELLED = "cancelled"  # Operator interrupt
    TEMPLATE = "template"  # Unresolved variable in strict mode


class WorkflowTrigger(BaseModel):
    """When a workflow is meant to run. Descriptive only."""

    schedule: str | None = None  # Cron syntax
    manual: bool | None = None
    event: str | None = None

    def describe(self) -> str | None:
        if self.schedule:
            return f"schedule({self.schedule})"
        if self.manual:
            return "manual"
        return self.event


class WorkflowStep(BaseModel):
    """Definition of a workflow step."""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    run: str
    shell: str | None = None
    output: str | None = None
    when: str | None = None
    retries: int = 0
    retry_delay: float | None = None
    timeout: float | None = None
    continue_on_error: bool = False

    def label(self, index: int) -> str:
        """Display name; unnamed steps are numbered from 1."""
        return self.name or f"step-{index + 1}"

    @property
    def unknown_keys(self) -> list[str]:
        return sorted(self.model_extra or {})


class WorkflowErrorHandler(BaseModel):
    """Action taken once after a workflow fails."""

    notify: str | None = None
    run: str | None = None


class Workflow(BaseModel):
    """Complete workflow definition."""

    model_config = ConfigDict(extra="allow")

    name: str
    description: str | None = None
    version: str | None = None
    author: str | None = None
    env: dict[str, str] = Field(default_factory=dict)
    triggers: list[WorkflowTrigger] = Field(default_factory=list)
    steps: list[WorkflowStep]
    on_error: list[WorkflowErrorHandler] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, value: Any) -> Any:
        # `version: 1.0` is a float in YAML
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("env", mode="before")
    @classmethod
    def _env_values_as_text(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        coerced: dict[Any, Any] = {}
        for key, item in value.items():
            if isinstance(item, bool):
                item = "true" if item else "false"
            elif isinstance(item, (int, float)):
                item = str(item)
            elif item is None:
                item = ""
            coerced[str(key)] = item
        return coerced

    @field_validator("triggers", "on_error", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def unknown_keys(self) -> list[str]:
        return sorted(self.model_extra or {})

    def trigger_descriptions(self) -> list[str]:
        return [d for d in (t.describe() for t in self.triggers) if d]


class StepError(BaseModel):
    """Failure details attached to a failed step."""

    model_config = ConfigDict(use_enum_values=True)

    kind: FailureKind
    message: str
    exit_code: int | None = None


class StepResult(BaseModel):
    """Outcome of one step."""

    model_config = ConfigDict(use_enum_values=True)

    name: str
    status: StepStatus
    duration_ms: int = 0
    attempts: int = 0
    command: str | None = None
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: StepError | None = None

    @property
    def failed(self) -> bool:
        return self.status == StepStatus.FAILED


class WorkflowResult(BaseModel):
    """Outcome of one workflow run. Never persisted by the engine."""

    workflow: str
    success: bool
    dry_run: bool = False
    cancelled: bool = False
    steps: list[StepResult] = Field(default_factory=list)
    handlers: list[StepResult] = Field(default_factory=list)
    error: str | None = None
    started_at: datetime
    finished_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration_ms(self) -> int:
        return int((self.finished_at - self.started_at).total_seconds() * 1000)
