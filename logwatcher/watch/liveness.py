"""LivenessGuard — is the process we live alongside still there?

The guarded PID is the one supplied with ``--ppid`` or, failing that, the
parent PID reported by the OS at startup (the invoking shell, before any
fork).  "Not alive" is an ordinary answer, never an exception.
"""

from __future__ import annotations

import os

import psutil

from logwatcher.exceptions import ConfigurationError
from logwatcher.logging import get_logger

log = get_logger(__name__)


def resolve_parent_pid(explicit: int | None, required: bool) -> int | None:
    """Return the PID to guard, or None when there is nothing to guard.

    A negative *explicit* value counts as not given and falls back to the
    parent PID reported by the OS.

    Raises:
        ConfigurationError: no usable PID and liveness checking is required.
    """
    pid = explicit if explicit is not None and explicit >= 0 else os.getppid()
    if pid > 0:
        return pid
    if required:
        raise ConfigurationError(
            "Cannot get the parent process ID. The option --ppid ${PPID} "
            "needs to be specified manually.",
            option="--ppid",
        )
    return None


class LivenessGuard:
    """Probe a single PID on demand.

    A guard built with ``pid=None`` is disabled and always reports alive.
    """

    def __init__(self, pid: int | None) -> None:
        self._pid = pid

    @property
    def pid(self) -> int | None:
        return self._pid

    def is_alive(self) -> bool:
        if self._pid is None:
            return True
        try:
            status = psutil.Process(self._pid).status()
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            # Exists but belongs to someone else.
            return True
        alive = status != psutil.STATUS_ZOMBIE
        if not alive:
            log.debug("parent_is_zombie", pid=self._pid)
        return alive
