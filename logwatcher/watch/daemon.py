"""ProcessDaemonizer — release the caller's shell.

A single fork: the original process exits 0 straight away, the child starts
a new session and keeps running the watch loop.  There is no further contact
between the two.  The working directory and standard streams are left
alone, so relative paths in the command keep working and messages still
reach wherever the caller pointed them.
"""

from __future__ import annotations

import os
import sys

from logwatcher.exceptions import DaemonizeError
from logwatcher.logging import get_logger

log = get_logger(__name__)


def can_daemonize() -> bool:
    return hasattr(os, "fork")


def daemonize() -> bool:
    """Detach into the background.

    Returns True in the detached child, False when the host cannot fork and
    the caller must keep running in the foreground.  The original process
    never returns from this call.

    Raises:
        DaemonizeError: ``fork()`` failed.
    """
    if not can_daemonize():
        log.warning("daemonize_unsupported", platform=sys.platform, note="running in foreground")
        return False

    sys.stdout.flush()
    sys.stderr.flush()
    try:
        pid = os.fork()
    except OSError as exc:
        raise DaemonizeError(exc.strerror or str(exc)) from exc

    if pid > 0:
        os._exit(0)  # Exit the original process, skipping atexit handlers.

    os.setsid()
    log.debug("daemonized", pid=os.getpid())
    return True
