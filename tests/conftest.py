"""Shared pytest fixtures for sysflow tests.

Provides common fixtures for mocking engine components and writing
workflow files.
"""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from sysflow.config import EngineConfig
from sysflow.engine import Container
from sysflow.engine.mocks import MockBackend, fail, ok


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[EngineConfig]:
    """Keep every test away from the user's ~/.sysflow and SYSFLOW_* env.

    Yields:
        EngineConfig installed in the Container
    """
    for name in (
        "SYSFLOW_CONFIG",
        "SYSFLOW_WORKFLOWS_DIR",
        "SYSFLOW_DEFAULT_SHELL",
        "SYSFLOW_DEFAULT_RETRY_DELAY",
        "SYSFLOW_MAX_OUTPUT_CHARS",
        "SYSFLOW_KILL_GRACE_SECONDS",
        "SYSFLOW_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    config = EngineConfig(workflows_dir=tmp_path / "workflows", default_retry_delay=0.0)
    Container.set_config(config)
    yield config
    Container.reset()


@pytest.fixture
def mock_backend() -> Iterator[MockBackend]:
    """Fixture that sets up and tears down a mock backend via Container.

    Yields:
        MockBackend instance configured to return successful results
    """
    backend = MockBackend(ok("success"))
    Container.set_backend(backend)
    yield backend
    Container.reset()


@pytest.fixture
def failing_backend() -> Iterator[MockBackend]:
    """Fixture that provides a mock backend configured to return failures.

    Yields:
        MockBackend instance configured to return exit code 1
    """
    backend = MockBackend(fail(1, stderr="Error: test failure"))
    Container.set_backend(backend)
    yield backend
    Container.reset()


@pytest.fixture
def write_workflow(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing YAML text to a file under tmp_path.

    Returns:
        Callable taking (content, filename="workflow.yaml") and returning the path
    """

    def _write(content: str, filename: str = "workflow.yaml") -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
