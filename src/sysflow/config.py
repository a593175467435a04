"""Engine configuration schema and loading.

Settings come from, in order of precedence:
1. CLI flags (applied by the commands)
2. SYSFLOW_* environment variables
3. The YAML config file (~/.sysflow/config.yaml or $SYSFLOW_CONFIG)
4. Defaults
"""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from sysflow.exceptions import ConfigurationError

SYSFLOW_HOME = Path("~/.sysflow")
CONFIG_ENV_VAR = "SYSFLOW_CONFIG"

LogLevel = Literal["debug", "info", "warning", "error", "critical"]


class EngineConfig(BaseSettings):
    """Runtime settings for the workflow engine and CLI."""

    workflows_dir: Path = Field(
        default=SYSFLOW_HOME / "workflows",
        description="Default directory for list/new",
    )
    default_shell: str = Field(default="bash", description="Interpreter for steps without shell")
    default_retry_delay: float = Field(
        default=1.0, ge=0.0, description="Seconds between attempts when a step sets none"
    )
    max_output_chars: int = Field(
        default=4000, gt=0, description="Tail of stdout/stderr kept on step results"
    )
    kill_grace_seconds: float = Field(
        default=2.0, ge=0.0, description="Wait between SIGTERM and SIGKILL"
    )
    log_level: LogLevel = Field(default="warning")

    model_config = SettingsConfigDict(
        env_prefix="SYSFLOW_",
        case_sensitive=False,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Init kwargs carry the config file values, so env must win over them.
        return (env_settings, init_settings)

    def resolved_workflows_dir(self) -> Path:
        return self.workflows_dir.expanduser()


def default_config_path() -> Path:
    """Config file path, honouring $SYSFLOW_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return (SYSFLOW_HOME / "config.yaml").expanduser()


def load_config(config_path: Path | None = None) -> EngineConfig:
    """Load engine configuration.

    Args:
        config_path: YAML file to read. Defaults to default_config_path().

    Returns:
        EngineConfig with file values, environment overrides and defaults

    Raises:
        ConfigurationError: If the file is not valid YAML or has bad values
    """
    if config_path is None:
        config_path = default_config_path()

    file_values: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")
        file_values = loaded

    try:
        return EngineConfig(**file_values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config in {config_path}: {e}") from e
