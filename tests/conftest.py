"""Shared pytest fixtures for the logwatcher test suite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Generator

import pytest

from logwatcher.config import Settings, override_settings
from logwatcher.logging import clear_watch_context
from logwatcher.models import ProgramIdentity, WatchConfig


# ---------------------------------------------------------------------------
# Settings / identity
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    settings = Settings(logging={"level": "debug", "format": "console"})
    override_settings(settings)
    yield settings
    override_settings(None)


@pytest.fixture
def identity() -> ProgramIdentity:
    return ProgramIdentity(name="logwatcher")


@pytest.fixture(autouse=True)
def _reset_log_context() -> Generator[None, None, None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    clear_watch_context()
    root.handlers = handlers
    root.setLevel(level)


# ---------------------------------------------------------------------------
# Watched file
# ---------------------------------------------------------------------------


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    f = tmp_path / "app.log"
    f.write_text("2024 INFO service started\n2024 INFO listening on :8080\n", encoding="utf-8")
    return f


@pytest.fixture
def make_config(log_file: Path, identity: ProgramIdentity) -> Callable[..., WatchConfig]:
    """Build a WatchConfig with test-friendly defaults; keyword args override."""

    def _make(**overrides: object) -> WatchConfig:
        values: dict[str, object] = {
            "logfile": log_file,
            "keywords": ("ERROR",),
            "command": "true",
            "ignore_token": identity.ignore_token,
            "interval_seconds": 10,
            "timeout_seconds": 60,
            "check_at_start": True,
        }
        values.update(overrides)
        return WatchConfig(**values)  # type: ignore[arg-type]

    return _make
