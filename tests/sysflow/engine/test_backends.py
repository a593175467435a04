"""Tests for command backends and mocks."""

import subprocess
import time
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from sysflow.engine.backends import (
    DRY_RUN_PREFIX,
    TIMEOUT_EXIT_CODE,
    DryRunBackend,
    SubprocessBackend,
)
from sysflow.engine.mocks import MockBackend, fail, ok
from sysflow.engine.protocols import CommandBackend, CommandResult
from sysflow.exceptions import CommandLaunchError


class TestCommandResult:
    """Tests for CommandResult."""

    def test_basic_result(self) -> None:
        """Test basic result creation."""
        result = CommandResult(exit_code=0, stdout="output", stderr="", duration_seconds=1.5)
        assert result.exit_code == 0
        assert result.timed_out is False

    def test_result_is_frozen(self) -> None:
        """Test results cannot be modified."""
        result = CommandResult(exit_code=0, stdout="", stderr="", duration_seconds=0.0)
        with pytest.raises(ValidationError):
            result.exit_code = 1  # type: ignore[misc]


class TestSubprocessBackend:
    """Tests for SubprocessBackend against real shells."""

    def test_captures_stdout_and_exit_code(self) -> None:
        """Test stdout, stderr and exit code are captured."""
        result = SubprocessBackend().run("echo hello; echo oops >&2; exit 3", "sh")
        assert result.exit_code == 3
        assert result.stdout == "hello\n"
        assert result.stderr == "oops\n"
        assert result.timed_out is False

    def test_runs_in_working_directory(self, tmp_path: Path) -> None:
        """Test commands run in the given directory."""
        result = SubprocessBackend().run("pwd", "sh", cwd=tmp_path)
        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    def test_passes_environment(self) -> None:
        """Test the environment reaches the command."""
        result = SubprocessBackend().run('echo "$GREETING"', "sh", env={"GREETING": "hi", "PATH": "/usr/bin:/bin"})
        assert result.stdout == "hi\n"

    def test_timeout_kills_the_process_group(self) -> None:
        """Test a timeout kills background children too."""
        start = time.monotonic()
        result = SubprocessBackend(kill_grace_seconds=1.0).run(
            "echo started; sleep 30 & sleep 30", "sh", timeout=0.5
        )
        assert time.monotonic() - start < 10
        assert result.timed_out is True
        assert result.exit_code == TIMEOUT_EXIT_CODE
        assert "exceeded 0.5s" in result.stderr

    def test_unknown_shell_is_a_launch_error(self) -> None:
        """Test an unsupported shell fails to launch."""
        with pytest.raises(CommandLaunchError) as exc_info:
            SubprocessBackend().run("echo", "fish")
        assert "unsupported shell 'fish'" in exc_info.value.reason

    def test_missing_interpreter_is_a_launch_error(self) -> None:
        """Test a missing interpreter fails to launch."""
        backend = SubprocessBackend(shells={"ghost": ["/nonexistent/ghost-shell", "-c"]})
        with pytest.raises(CommandLaunchError):
            backend.run("echo", "ghost")

    def test_popen_arguments(self) -> None:
        """Test the arguments passed to Popen."""
        with patch("sysflow.engine.backends.subprocess.Popen") as mock_popen:
            proc = MagicMock(returncode=0, pid=1234)
            proc.communicate.return_value = ("out", "")
            mock_popen.return_value = proc

            result = SubprocessBackend().run("echo hi", "bash", timeout=30.0)

            args, kwargs = mock_popen.call_args
            assert args[0] == ["bash", "-c", "echo hi"]
            assert kwargs["start_new_session"] is True
            assert kwargs["text"] is True
            proc.communicate.assert_called_once_with(timeout=30.0)
            assert result.stdout == "out"

    def test_timeout_keeps_partial_output(self) -> None:
        """Test output written before a timeout is kept."""
        with patch("sysflow.engine.backends.subprocess.Popen") as mock_popen, patch(
            "sysflow.engine.backends.os.killpg"
        ) as mock_killpg:
            proc = MagicMock(pid=1234)
            proc.communicate.side_effect = [
                subprocess.TimeoutExpired(cmd=["sh"], timeout=5),
                ("partial output", ""),
            ]
            mock_popen.return_value = proc

            result = SubprocessBackend().run("slow", "sh", timeout=5.0)

            assert result.timed_out is True
            assert result.stdout == "partial output"
            assert mock_killpg.called

    def test_interrupt_terminates_and_propagates(self) -> None:
        """Test an interrupt kills the command and re-raises."""
        with patch("sysflow.engine.backends.subprocess.Popen") as mock_popen, patch(
            "sysflow.engine.backends.os.killpg"
        ) as mock_killpg:
            proc = MagicMock(pid=1234)
            proc.communicate.side_effect = KeyboardInterrupt()
            mock_popen.return_value = proc

            with pytest.raises(KeyboardInterrupt):
                SubprocessBackend().run("slow", "sh")

            assert mock_killpg.called


class TestDryRunBackend:
    """Tests for DryRunBackend."""

    def test_reports_success_without_running(self) -> None:
        """Test dry run records the command and succeeds."""
        backend = DryRunBackend()
        result = backend.run("rm -rf /", "bash")
        assert result.exit_code == 0
        assert result.stdout == f"{DRY_RUN_PREFIX}rm -rf /"
        assert backend.commands == ["rm -rf /"]


class TestMockBackend:
    """Tests for MockBackend scripting."""

    def test_satisfies_protocol(self) -> None:
        """Test every backend satisfies CommandBackend."""
        assert isinstance(MockBackend(), CommandBackend)
        assert isinstance(DryRunBackend(), CommandBackend)
        assert isinstance(SubprocessBackend(), CommandBackend)

    def test_queue_repeats_last_outcome(self) -> None:
        """Test the outcome queue repeats its last entry."""
        backend = MockBackend([fail(), ok("yes")])
        codes = [backend.run("x", "sh").exit_code for _ in range(3)]
        assert codes == [1, 0, 0]

    def test_per_command_outcomes(self) -> None:
        """Test outcomes scripted per command."""
        backend = MockBackend(ok("default")).on("special", ok("scripted"))
        assert backend.run("special", "sh").stdout == "scripted"
        assert backend.run("other", "sh").stdout == "default"

    def test_reset_clears_calls(self) -> None:
        """Test reset clears recorded calls."""
        backend = MockBackend()
        backend.run("x", "sh")
        backend.reset()
        assert backend.calls == []
