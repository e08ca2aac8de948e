"""logwatcher — Watch a log file for keywords and run a command.

logwatcher polls one text file at a fixed interval, looks for one or more
literal keywords, and runs a shell command once the configured condition
holds (any/all keywords found, or any/all missing).  It stops after the
first trigger, or keeps going until its timeout in "stay" mode, and aborts
as soon as the process that launched it goes away.

Layers (bottom to top):
    1. models / config / exceptions / logging — shared foundations
    2. watch   — matcher, condition, liveness guard, action, loop, daemon
    3. cli     — typer entry point, startup banner, exit status
"""

__version__ = "0.1.0"
__author__ = "logwatcher contributors"
__license__ = "BSD-3-Clause"

from logwatcher.models import ProgramIdentity, WatchConfig, WatchOutcome

__all__ = [
    "__version__",
    "ProgramIdentity",
    "WatchConfig",
    "WatchOutcome",
]
