"""Wiring of the engine's default collaborators.

The CLI and the module-level execution API get their backend and
settings from here, so tests swap in a MockBackend or a fixed
EngineConfig in one place:

    Container.set_backend(MockBackend())
    Container.set_config(EngineConfig(default_retry_delay=0))
    result = run_workflow_file("deploy.yaml")
    Container.reset()
"""

from sysflow.config import EngineConfig, load_config
from sysflow.engine.backends import SubprocessBackend
from sysflow.engine.protocols import CommandBackend
from sysflow.engine.runner import WorkflowRunner


class Container:
    """Process-wide holder for the command backend and engine settings.

    Both are created on first use; set_* replaces them until reset().
    """

    _backend: CommandBackend | None = None
    _config: EngineConfig | None = None

    @classmethod
    def config(cls) -> EngineConfig:
        """Engine settings, read from the config file and SYSFLOW_* env on first access.

        Raises:
            ConfigurationError: If the config file is invalid
        """
        if cls._config is None:
            cls._config = load_config()
        return cls._config

    @classmethod
    def backend(cls) -> CommandBackend:
        """Command backend; a SubprocessBackend unless overridden."""
        if cls._backend is None:
            cls._backend = SubprocessBackend(kill_grace_seconds=cls.config().kill_grace_seconds)
        return cls._backend

    @classmethod
    def workflow_runner(cls) -> WorkflowRunner:
        """Build a WorkflowRunner from the current backend and settings."""
        return WorkflowRunner(backend=cls.backend(), config=cls.config())

    @classmethod
    def set_backend(cls, backend: CommandBackend | None) -> None:
        """Replace the backend. None restores the default on next access."""
        cls._backend = backend

    @classmethod
    def set_config(cls, config: EngineConfig | None) -> None:
        """Replace the settings. None reloads them on next access."""
        cls._config = config

    @classmethod
    def reset(cls) -> None:
        """Drop every override; used in test teardown."""
        cls._backend = None
        cls._config = None
