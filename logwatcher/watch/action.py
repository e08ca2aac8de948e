"""ActionRunner — run the configured command once per trigger."""

from __future__ import annotations

from logwatcher.exceptions import ActionFailure
from logwatcher.logging import get_logger
from logwatcher.shell import ShellResult, run_shell

log = get_logger(__name__)


class ActionRunner:
    """Execute the command synchronously through the host shell.

    A failing command is logged and reported through the returned
    ``ShellResult``; it never raises and never changes what the loop does
    next.  No retry and no timeout: the command runs to completion.
    """

    def __init__(self, command: str) -> None:
        self._command = command

    @property
    def command(self) -> str:
        return self._command

    def run(self) -> ShellResult:
        result = run_shell(self._command)
        try:
            result.raise_for_status()
        except ActionFailure as exc:
            log.error(
                "command_failed",
                command=self._command,
                return_code=exc.return_code,
                error=exc.message,
                note="won't repeat",
            )
        else:
            log.info("command_executed", command=self._command)
        return result
