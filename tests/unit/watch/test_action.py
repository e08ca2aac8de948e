"""Unit tests — watch/action.py (ActionRunner)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from logwatcher.shell import ShellResult
from logwatcher.watch.action import ActionRunner


@pytest.mark.unit
class TestActionRunner:
    def test_runs_command_through_shell(self) -> None:
        with patch(
            "logwatcher.watch.action.run_shell",
            return_value=ShellResult(command="echo hi", return_code=0),
        ) as mock_run:
            result = ActionRunner("echo hi").run()
        mock_run.assert_called_once_with("echo hi")
        assert result.success

    def test_nonzero_exit_is_reported_not_raised(self) -> None:
        with patch(
            "logwatcher.watch.action.run_shell",
            return_value=ShellResult(command="false", return_code=1),
        ):
            result = ActionRunner("false").run()
        assert result.success is False
        assert result.return_code == 1

    def test_launch_error_is_reported_not_raised(self) -> None:
        with patch(
            "logwatcher.watch.action.run_shell",
            return_value=ShellResult(command="x", return_code=None, error="No such file"),
        ):
            result = ActionRunner("x").run()
        assert result.return_code is None
        assert result.error == "No such file"

    def test_shell_syntax_is_honoured(self, tmp_path: Path) -> None:
        target = tmp_path / "out.txt"
        runner = ActionRunner(f"echo one > '{target}' && echo two >> '{target}'")
        assert runner.run().success
        assert target.read_text().split() == ["one", "two"]

    def test_command_property(self) -> None:
        assert ActionRunner("make alert").command == "make alert"
