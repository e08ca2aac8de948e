"""Startup validation — turn raw command-line values into a WatchConfig.

Everything here runs once, before daemonizing, so problems are still
reported to the caller's terminal.  Adjustments the user should know about
(clamped durations, ignored options) are logged as warnings; anything that
makes the run impossible raises ConfigurationError.

The watched file is deliberately *not* required to exist yet: the watcher
may be started before the program whose log it follows.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple

from logwatcher.config import LimitsConfig, Settings
from logwatcher.exceptions import ConfigurationError
from logwatcher.logging import get_logger
from logwatcher.models import ProgramIdentity, WatchConfig
from logwatcher.shell import run_shell
from logwatcher.watch.liveness import resolve_parent_pid

log = get_logger(__name__)


@dataclass
class WatchOptions:
    """Raw values as given on the command line.  None means "not given"."""

    logfile: Path | None = None
    keywords: list[str] = field(default_factory=list)
    command: str | None = None
    interval_seconds: int | None = None
    timeout_minutes: int | None = None
    missing: bool = False
    require_all: bool = False
    stay: bool = False
    check_once: bool = False
    check_at_start: bool = False
    foreground: bool = False
    verbose: bool = False
    ppid: int | None = None


class Timing(NamedTuple):
    interval_seconds: int
    timeout_seconds: int
    stay: bool


def apply_timing_policy(
    interval_seconds: int,
    timeout_seconds: int | None,
    limits: LimitsConfig,
    check_once: bool = False,
    check_at_start: bool = False,
    stay: bool = False,
) -> Timing:
    """Clamp interval and timeout, then force single-shot semantics.

    Single-shot timeouts are chosen so the loop body runs exactly once:
    the epsilon alone when the first check is immediate, one interval plus
    the epsilon otherwise.
    """
    interval = interval_seconds
    if interval < limits.min_interval_seconds:
        interval = limits.min_interval_seconds
        log.warning("interval_too_short", interval=interval, note="set to the shortest allowed")
    upper = limits.max_timeout_seconds if check_once else limits.max_interval_seconds
    if interval > upper:
        interval = upper
        log.warning("interval_too_long", interval=interval, note="set to the longest allowed")

    if timeout_seconds is None or timeout_seconds <= 0:
        timeout = limits.max_timeout_seconds
    elif timeout_seconds > limits.max_timeout_seconds:
        timeout = limits.max_timeout_seconds
        log.warning("timeout_too_long", timeout=timeout, note="set to the longest allowed")
    else:
        timeout = timeout_seconds

    if check_once:
        epsilon = limits.single_shot_epsilon_seconds
        timeout = epsilon if check_at_start else interval + epsilon
        if stay:
            stay = False
            log.warning("stay_ignored", note="--check-once is set, so --stay will be ignored")

    return Timing(interval, timeout, stay)


def command_resolves(command: str) -> bool:
    """True if the first word of *command* is something the shell can run."""
    try:
        words = shlex.split(command)
    except ValueError:
        return False
    if not words:
        return False
    probe = run_shell(f"command -v {shlex.quote(words[0])} >/dev/null 2>&1", capture_output=True)
    return probe.success


def build_watch_config(
    options: WatchOptions,
    settings: Settings,
    identity: ProgramIdentity,
) -> WatchConfig:
    """Validate *options* against *settings* and return the run's WatchConfig.

    Raises:
        ConfigurationError: a required value is missing or unusable.
    """
    defaults = settings.defaults

    interval = defaults.interval_seconds
    if options.interval_seconds is not None:
        interval = abs(options.interval_seconds)
        if interval == 0:
            interval = defaults.interval_seconds
            log.warning("invalid_interval", option="--interval", note="will use the default value")

    timeout: int | None = None
    if options.timeout_minutes is not None:
        timeout = abs(options.timeout_minutes) * 60
        if timeout == 0:
            timeout = settings.limits.max_timeout_seconds
            log.warning("invalid_timeout", option="--timeout", note="will set to the longest")

    timing = apply_timing_policy(
        interval,
        timeout,
        settings.limits,
        check_once=options.check_once,
        check_at_start=options.check_at_start,
        stay=options.stay,
    )

    logfile = options.logfile or defaults.logfile
    if logfile is None or not str(logfile).strip():
        raise ConfigurationError(
            "No filepath was specified. The option --logfile <filepath> is needed.",
            option="--logfile",
        )

    keywords = list(options.keywords) or list(defaults.keywords)
    if not keywords:
        raise ConfigurationError(
            "No keyword was specified. The option --catch <keyword> is needed.",
            option="--catch",
        )

    command = options.command if options.command is not None else defaults.command
    if not command.strip():
        raise ConfigurationError(
            "No command was specified. The option --execute <command> is needed.",
            option="--execute",
        )
    _check_recursion(command, identity, timing.stay)
    if not command_resolves(command):
        raise ConfigurationError(
            f'The specified command, "{command}", seems to be invalid. '
            "Please recheck it carefully.",
            option="--execute",
        )

    parent_pid = resolve_parent_pid(options.ppid, required=settings.check_parent)

    return WatchConfig(
        logfile=Path(logfile).expanduser(),
        keywords=tuple(keywords),
        command=command,
        ignore_token=identity.ignore_token,
        interval_seconds=timing.interval_seconds,
        timeout_seconds=timing.timeout_seconds,
        trigger_on_found=not options.missing,
        require_all=options.require_all,
        check_once=options.check_once,
        check_at_start=options.check_at_start,
        stay=timing.stay,
        verbose=options.verbose,
        foreground=options.foreground,
        parent_pid=parent_pid,
    )


def _check_recursion(command: str, identity: ProgramIdentity, stay: bool) -> None:
    if identity.name not in command:
        return
    if stay:
        raise ConfigurationError(
            f"Possible recursive invocation with --stay set: '{identity.name}' "
            "appears in the specified command.",
            option="--execute",
        )
    log.warning("possible_recursive_invocation", program=identity.name, command=command)
