"""Watcher data models.

Key classes
-----------
ProgramIdentity   — who the watcher is (name, upper-case name, ignore token)
WatchConfig       — the validated, read-only description of one watch run
PresenceVector    — one boolean per keyword for a single file pass
LoopPhase         — scheduler state machine
AbortReason       — why a run ended abnormally
LoopState         — mutable counters owned by the running loop
WatchOutcome      — what a finished run reports back to the CLI
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DEFAULT_PROGRAM_NAME = "logwatcher"

PresenceVector = tuple[bool, ...]


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProgramIdentity:
    """Process-wide identity, fixed at startup.

    ``ignore_token`` marks lines the watcher must never count as a match,
    typically lines it wrote itself.
    """

    name: str

    @property
    def upper_name(self) -> str:
        return self.name.upper()

    @property
    def ignore_token(self) -> str:
        return f"<{self.upper_name}-ignore>"

    @classmethod
    def from_argv0(cls, argv0: str | None) -> "ProgramIdentity":
        """Derive the identity from the executable path the process was started with."""
        name = Path(argv0).name if argv0 else ""
        if not name or name in ("__main__.py", "-c"):
            name = DEFAULT_PROGRAM_NAME
        return cls(name=name)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WatchConfig:
    """Everything one run needs, after defaults, clamping and validation.

    Durations are whole seconds.  ``parent_pid`` is None when liveness
    checking is disabled.
    """

    logfile: Path
    keywords: tuple[str, ...]
    command: str
    ignore_token: str
    interval_seconds: int
    timeout_seconds: int
    trigger_on_found: bool = True
    require_all: bool = False
    check_once: bool = False
    check_at_start: bool = False
    stay: bool = False
    verbose: bool = False
    foreground: bool = False
    parent_pid: int | None = None

    def __post_init__(self) -> None:
        if not self.keywords:
            raise ValueError("WatchConfig requires at least one keyword")
        if self.interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {self.interval_seconds}")
        if self.timeout_seconds < 0:
            raise ValueError(f"timeout_seconds must not be negative, got {self.timeout_seconds}")

    @property
    def max_ticks(self) -> int:
        """Upper bound on the number of checks a run can perform."""
        return self.timeout_seconds // self.interval_seconds + 1


# ---------------------------------------------------------------------------
# Loop state
# ---------------------------------------------------------------------------


class LoopPhase(str, Enum):
    """Scheduler state machine.

    State machine::

        IDLE → WAITING → CHECKING → WAITING    (condition not met)
                                  → TRIGGERED  (action ran)
                                  → ABORTED    (dead parent / missing file)
               WAITING → EXPIRED               (elapsed > timeout)

        TRIGGERED → WAITING (stay mode only)
    """

    IDLE = "idle"
    WAITING = "waiting"
    CHECKING = "checking"
    TRIGGERED = "triggered"
    EXPIRED = "expired"
    ABORTED = "aborted"


class AbortReason(str, Enum):
    PARENT_DEAD = "parent_dead"
    FILE_MISSING = "file_missing"


@dataclass
class LoopState:
    elapsed_seconds: int = 0
    ticks: int = 0
    triggered: bool = False
    trigger_count: int = 0
    error_exit: bool = False
    phase: LoopPhase = LoopPhase.IDLE
    abort_reason: AbortReason | None = None


@dataclass(frozen=True)
class WatchOutcome:
    """Terminal report of a watch run."""

    phase: LoopPhase
    ticks: int
    trigger_count: int
    elapsed_seconds: int
    abort_reason: AbortReason | None = None
    message: str = ""
    elapsed_history: list[int] = field(default_factory=list, compare=False)

    @property
    def exit_code(self) -> int:
        return 1 if self.phase is LoopPhase.ABORTED else 0
