"""WatchLoop — the polling state machine.

Each tick, in this fixed order:
    1. LivenessGuard   — dead parent aborts the run
    2. file existence  — a missing file aborts the run (checked fresh every tick)
    3. KeywordMatcher + ConditionEvaluator
    4. ActionRunner    — only when the condition holds
    5. sleep one interval, advance elapsed by one interval

The loop keeps going while ``elapsed <= timeout``, so a run performs at most
``timeout // interval + 1`` ticks.  When ``check_at_start`` is off the first
tick happens after one interval and elapsed starts at one interval.

Abort conditions are raised inside the tick and interpreted here only: this
is the single place that turns them into a terminal phase and exit status.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from logwatcher.exceptions import FileUnavailableError, LivenessFailure
from logwatcher.logging import get_logger
from logwatcher.models import AbortReason, LoopPhase, LoopState, WatchConfig, WatchOutcome
from logwatcher.watch.action import ActionRunner
from logwatcher.watch.condition import describe_outcome, evaluate_condition
from logwatcher.watch.liveness import LivenessGuard
from logwatcher.watch.matcher import KeywordMatcher

log = get_logger(__name__)

SleepFn = Callable[[float], None]


class WatchLoop:
    """Drive repeated checks of one file for one rule.

    Usage::

        outcome = WatchLoop(config).run()
        sys.exit(outcome.exit_code)

    Collaborators default to the real implementations built from *config*;
    tests pass fakes and a no-op ``sleep``.
    """

    def __init__(
        self,
        config: WatchConfig,
        matcher: KeywordMatcher | None = None,
        guard: LivenessGuard | None = None,
        runner: ActionRunner | None = None,
        sleep: SleepFn | None = None,
    ) -> None:
        self._config = config
        self._matcher = matcher or KeywordMatcher(config.keywords, config.ignore_token)
        self._guard = guard or LivenessGuard(config.parent_pid)
        self._runner = runner or ActionRunner(config.command)
        self._sleep = sleep or time.sleep
        self._state = LoopState()
        self._history: list[int] = []

    @property
    def state(self) -> LoopState:
        return self._state

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    def run(self) -> WatchOutcome:
        cfg = self._config
        state = self._state = LoopState()
        self._history = []

        log.debug(
            "watch_loop_started",
            interval=cfg.interval_seconds,
            timeout=cfg.timeout_seconds,
            check_at_start=cfg.check_at_start,
            stay=cfg.stay,
        )

        state.phase = LoopPhase.WAITING
        if not cfg.check_at_start:
            self._wait()

        while state.elapsed_seconds <= cfg.timeout_seconds:
            state.phase = LoopPhase.CHECKING
            state.ticks += 1
            self._history.append(state.elapsed_seconds)

            try:
                state.triggered = self._tick()
            except LivenessFailure as exc:
                return self._abort(AbortReason.PARENT_DEAD, exc.message)
            except FileUnavailableError as exc:
                return self._abort(AbortReason.FILE_MISSING, exc.message)

            if state.triggered:
                state.trigger_count += 1
                state.phase = LoopPhase.TRIGGERED
                if not cfg.stay:
                    return self._outcome("Condition met, command executed")

            state.phase = LoopPhase.WAITING
            self._wait()

        return self._expire()

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    def _tick(self) -> bool:
        cfg = self._config
        if not self._guard.is_alive():
            raise LivenessFailure(self._guard.pid or 0)
        if not cfg.logfile.exists():
            raise FileUnavailableError(str(cfg.logfile))

        presence = self._matcher.scan(cfg.logfile)
        triggered = evaluate_condition(presence, cfg.trigger_on_found, cfg.require_all)
        detail = describe_outcome(cfg.trigger_on_found, cfg.require_all, triggered)

        if triggered:
            log.info("condition_met", detail=detail, tick=self._state.ticks)
            log.info("executing_command", command=cfg.command)
            self._runner.run()
        elif cfg.verbose:
            log.info("condition_not_met", detail=detail, tick=self._state.ticks)
        return triggered

    def _wait(self) -> None:
        self._sleep(self._config.interval_seconds)
        self._state.elapsed_seconds += self._config.interval_seconds

    def _abort(self, reason: AbortReason, message: str) -> WatchOutcome:
        state = self._state
        state.phase = LoopPhase.ABORTED
        state.error_exit = True
        state.abort_reason = reason
        log.error("watch_aborted", reason=reason.value, error=message, note="Terminate.")
        return self._outcome(message)

    def _expire(self) -> WatchOutcome:
        state = self._state
        # Stay mode that fired at least once ends as TRIGGERED, not as a plain expiry.
        state.phase = LoopPhase.TRIGGERED if state.trigger_count else LoopPhase.EXPIRED
        if not state.triggered and self._config.verbose:
            log.warning("timeout_reached", elapsed=state.elapsed_seconds, note="Terminate.")
        return self._outcome("Timeout reached")

    def _outcome(self, message: str) -> WatchOutcome:
        state = self._state
        return WatchOutcome(
            phase=state.phase,
            ticks=state.ticks,
            trigger_count=state.trigger_count,
            elapsed_seconds=state.elapsed_seconds,
            abort_reason=state.abort_reason,
            message=message,
            elapsed_history=list(self._history),
        )
