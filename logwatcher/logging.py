"""logwatcher — Structured logging configuration.

Uses structlog for structured, levelled logging with consistent key names
across all components.  All log entries include:
    - timestamp (ISO-8601)
    - level
    - module (Python logger name)
    - watcher / pid / logfile (bound once at startup via ``bind_watch_context``)

The ``watcher`` field carries the ignore token.  Every line the watcher
writes therefore contains it, so the watcher's own output never counts as a
keyword match when it ends up in the file being watched.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Any

import structlog
from structlog.types import EventDict, WrappedLogger

# Context variables, injected into log records when set.
_ctx_ignore_token: ContextVar[str | None] = ContextVar("ignore_token", default=None)
_ctx_pid: ContextVar[int | None] = ContextVar("pid", default=None)
_ctx_logfile: ContextVar[str | None] = ContextVar("logfile", default=None)


def bind_watch_context(
    ignore_token: str | None = None,
    pid: int | None = None,
    logfile: str | None = None,
) -> None:
    """Bind watcher identity to every subsequent log record."""
    if ignore_token is not None:
        _ctx_ignore_token.set(ignore_token)
    if pid is not None:
        _ctx_pid.set(pid)
    if logfile is not None:
        _ctx_logfile.set(logfile)


def clear_watch_context() -> None:
    _ctx_ignore_token.set(None)
    _ctx_pid.set(None)
    _ctx_logfile.set(None)


# ---------------------------------------------------------------------------
# Custom processors
# ---------------------------------------------------------------------------


def _inject_context_vars(
    _logger: WrappedLogger, _method: str, event_dict: EventDict
) -> EventDict:
    """Add ContextVar values to every log record."""
    if (token := _ctx_ignore_token.get()) is not None:
        event_dict["watcher"] = token
    if (pid := _ctx_pid.get()) is not None:
        event_dict["pid"] = pid
    if (logfile := _ctx_logfile.get()) is not None:
        event_dict["logfile"] = logfile
    return event_dict


class _BelowLevelFilter(logging.Filter):
    """Pass only records strictly below *level* (stdout side of the split)."""

    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def configure_logging(
    level: str = "info",
    format: str = "console",
    log_file: str | None = None,
) -> None:
    """Configure structlog and stdlib logging.

    Call once at startup, before any log statements.  Records below WARNING
    go to stdout, WARNING and above to stderr.

    Args:
        level:    One of debug, info, warning, error, critical.
        format:   ``"console"`` for human-readable output, ``"json"`` for
                  machine-readable structured logs.
        log_file: Optional path to write logs to in addition to the streams.
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _inject_context_vars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handlers: list[logging.Handler] = []

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(_BelowLevelFilter(logging.WARNING))
    handlers.append(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.WARNING)
    handlers.append(stderr_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(level.upper())


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger for *name*.

    Usage::

        log = get_logger(__name__)
        log.info("keywords_found", keywords=["ERROR"], tick=3)
    """
    return structlog.get_logger(name)
