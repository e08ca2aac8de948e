"""Synchronous host-shell execution.

One capability, two call sites: the triggered action and the startup
``command -v`` probe that checks the configured command resolves.

Unlike argument-list execution, the command string is handed to the host
shell verbatim.  That is the contract: users pass pipelines, redirections
and shell built-ins.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass

from logwatcher.exceptions import ActionFailure


@dataclass(frozen=True)
class ShellResult:
    command: str
    return_code: int | None
    stdout: str = ""
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.return_code == 0

    def raise_for_status(self) -> None:
        if not self.success:
            raise ActionFailure(self.command, self.return_code, self.error or "")


def run_shell(command: str, *, capture_output: bool = False) -> ShellResult:
    """Run *command* through the host shell and wait for it to finish.

    Never raises for a failing command: a launch error is reported through
    ``ShellResult.error`` with ``return_code=None``.
    """
    try:
        proc = subprocess.run(
            command,
            shell=True,
            check=False,
            stdout=subprocess.PIPE if capture_output else None,
            stderr=subprocess.DEVNULL if capture_output else None,
        )
    except OSError as exc:
        return ShellResult(command=command, return_code=None, error=str(exc))

    stdout = proc.stdout.decode(errors="replace") if proc.stdout else ""
    return ShellResult(command=command, return_code=proc.returncode, stdout=stdout)
