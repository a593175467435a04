"""Tests for engine configuration loading."""

from pathlib import Path

import pytest

from sysflow.config import EngineConfig, default_config_path, load_config
from sysflow.exceptions import ConfigurationError


class TestEngineConfig:
    """Tests for EngineConfig defaults and environment overrides."""

    def test_defaults(self) -> None:
        """Test default settings."""
        config = EngineConfig()
        assert config.default_shell == "bash"
        assert config.default_retry_delay == 1.0
        assert config.max_output_chars == 4000
        assert config.log_level == "warning"
        assert config.workflows_dir == Path("~/.sysflow/workflows")

    def test_resolved_workflows_dir_expands_user(self) -> None:
        """Test the workflows directory expands ~."""
        assert "~" not in str(EngineConfig().resolved_workflows_dir())

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test environment variables override defaults."""
        monkeypatch.setenv("SYSFLOW_DEFAULT_SHELL", "sh")
        monkeypatch.setenv("SYSFLOW_MAX_OUTPUT_CHARS", "100")
        config = EngineConfig()
        assert config.default_shell == "sh"
        assert config.max_output_chars == 100


class TestLoadConfig:
    """Tests for load_config()."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """Test a missing config file gives defaults."""
        config = load_config(tmp_path / "config.yaml")
        assert config.default_shell == "bash"

    def test_file_values(self, tmp_path: Path) -> None:
        """Test values read from the config file."""
        path = tmp_path / "config.yaml"
        path.write_text("default_shell: zsh\ndefault_retry_delay: 0.5\nworkflows_dir: /srv/flows\n")
        config = load_config(path)
        assert config.default_shell == "zsh"
        assert config.default_retry_delay == 0.5
        assert config.workflows_dir == Path("/srv/flows")

    def test_environment_beats_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test environment variables beat the config file."""
        path = tmp_path / "config.yaml"
        path.write_text("default_shell: zsh\n")
        monkeypatch.setenv("SYSFLOW_DEFAULT_SHELL", "sh")
        assert load_config(path).default_shell == "sh"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        """Test an empty config file gives defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path).max_output_chars == 4000

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test a config file with invalid YAML."""
        path = tmp_path / "config.yaml"
        path.write_text("default_shell: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """Test a config file that is not a mapping."""
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        """Test a config file with an invalid value."""
        path = tmp_path / "config.yaml"
        path.write_text("max_output_chars: -5\n")
        with pytest.raises(ConfigurationError, match="Invalid config"):
            load_config(path)

    def test_config_path_from_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the config path comes from the environment."""
        path = tmp_path / "custom.yaml"
        path.write_text("log_level: debug\n")
        monkeypatch.setenv("SYSFLOW_CONFIG", str(path))
        assert default_config_path() == path
        assert load_config().log_level == "debug"
