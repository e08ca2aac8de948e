"""logwatcher — Exception hierarchy.

All exceptions raised by the watcher inherit from LogWatcherError so that
callers can catch the full family with a single except clause when needed.

Hierarchy:
    LogWatcherError
    ├── ConfigurationError
    ├── FileUnavailableError
    ├── LivenessFailure
    ├── ActionFailure
    └── DaemonizeError
"""

from __future__ import annotations

from typing import Any


class LogWatcherError(Exception):
    """Base exception for all logwatcher errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context})"


class ConfigurationError(LogWatcherError):
    """A command-line value or setting is missing or unusable.

    Raised during startup only.  The watcher never starts its loop after one.
    """

    def __init__(self, message: str, option: str | None = None) -> None:
        super().__init__(message, context={"option": option})
        self.option = option


class FileUnavailableError(LogWatcherError):
    """The watched file does not exist or cannot be opened for reading."""

    def __init__(self, path: str, reason: str = "does not exist") -> None:
        super().__init__(
            f"The file '{path}' {reason}",
            context={"path": path, "reason": reason},
        )
        self.path = path
        self.reason = reason


class LivenessFailure(LogWatcherError):
    """The guarded parent process is no longer alive."""

    def __init__(self, pid: int) -> None:
        super().__init__(
            f"Parent process (PPID={pid}) does not exist",
            context={"pid": pid},
        )
        self.pid = pid


class ActionFailure(LogWatcherError):
    """The configured command returned nonzero or could not be launched.

    Never fatal: the loop reports it and carries on.
    """

    def __init__(self, command: str, return_code: int | None, reason: str = "") -> None:
        super().__init__(
            f"Abnormal return when executing the command '{command}'"
            + (f": {reason}" if reason else ""),
            context={"command": command, "return_code": return_code, "reason": reason},
        )
        self.command = command
        self.return_code = return_code


class DaemonizeError(LogWatcherError):
    """The watcher could not detach into the background."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Cannot fork child process: {reason}", context={"reason": reason})
        self.reason = reason
