"""Watch subsystem — the polling, condition and lifecycle core.

Package structure
-----------------
watch/
  matcher.py    — KeywordMatcher: one full pass over the file
  condition.py  — evaluate_condition: found/missing × any/all truth table
  liveness.py   — LivenessGuard: is the parent process still alive
  action.py     — ActionRunner: run the command once per trigger
  scheduler.py  — WatchLoop: interval / timeout / stay / single-shot loop
  daemon.py     — daemonize: detach from the caller's shell
  builder.py    — build_watch_config: startup validation and clamping
"""

from logwatcher.watch.action import ActionRunner
from logwatcher.watch.builder import WatchOptions, apply_timing_policy, build_watch_config
from logwatcher.watch.condition import describe_condition, evaluate_condition
from logwatcher.watch.daemon import daemonize
from logwatcher.watch.liveness import LivenessGuard, resolve_parent_pid
from logwatcher.watch.matcher import KeywordMatcher
from logwatcher.watch.scheduler import WatchLoop

__all__ = [
    "ActionRunner",
    "KeywordMatcher",
    "LivenessGuard",
    "WatchLoop",
    "WatchOptions",
    "apply_timing_policy",
    "build_watch_config",
    "daemonize",
    "describe_condition",
    "evaluate_condition",
    "resolve_parent_pid",
]
