"""Unit tests — watch/liveness.py (LivenessGuard, resolve_parent_pid)."""

from __future__ import annotations

import os
import subprocess
import time
from unittest.mock import patch

import psutil
import pytest

from logwatcher.exceptions import ConfigurationError
from logwatcher.watch.liveness import LivenessGuard, resolve_parent_pid


@pytest.mark.unit
class TestLivenessGuard:
    def test_own_process_is_alive(self) -> None:
        assert LivenessGuard(os.getpid()).is_alive() is True

    def test_disabled_guard_always_alive(self) -> None:
        guard = LivenessGuard(None)
        assert guard.pid is None
        assert guard.is_alive() is True

    def test_reaped_process_is_dead(self) -> None:
        proc = subprocess.Popen(["true"])
        proc.wait()
        assert LivenessGuard(proc.pid).is_alive() is False

    def test_zombie_is_dead(self) -> None:
        proc = subprocess.Popen(["true"])
        try:
            for _ in range(100):
                if psutil.Process(proc.pid).status() == psutil.STATUS_ZOMBIE:
                    break
                time.sleep(0.05)
            assert LivenessGuard(proc.pid).is_alive() is False
        finally:
            proc.wait()

    def test_access_denied_counts_as_alive(self) -> None:
        with patch(
            "logwatcher.watch.liveness.psutil.Process",
            side_effect=psutil.AccessDenied(pid=1),
        ):
            assert LivenessGuard(1).is_alive() is True

    def test_probe_is_repeatable(self) -> None:
        guard = LivenessGuard(os.getpid())
        assert [guard.is_alive() for _ in range(3)] == [True, True, True]


@pytest.mark.unit
class TestResolveParentPid:
    def test_explicit_pid_wins(self) -> None:
        assert resolve_parent_pid(1234, required=True) == 1234

    def test_defaults_to_os_parent(self) -> None:
        assert resolve_parent_pid(None, required=True) == os.getppid()

    def test_unknown_parent_required(self) -> None:
        with patch("logwatcher.watch.liveness.os.getppid", return_value=0):
            with pytest.raises(ConfigurationError) as exc_info:
                resolve_parent_pid(None, required=True)
        assert exc_info.value.option == "--ppid"
        assert "--ppid" in exc_info.value.message

    def test_unknown_parent_not_required(self) -> None:
        with patch("logwatcher.watch.liveness.os.getppid", return_value=0):
            assert resolve_parent_pid(None, required=False) is None

    def test_explicit_zero_pid_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            resolve_parent_pid(0, required=True)

    def test_explicit_negative_pid_falls_back_to_os_parent(self) -> None:
        assert resolve_parent_pid(-5, required=True) == os.getppid()

    def test_negative_pid_with_unknown_parent(self) -> None:
        with patch("logwatcher.watch.liveness.os.getppid", return_value=0):
            with pytest.raises(ConfigurationError):
                resolve_parent_pid(-5, required=True)
