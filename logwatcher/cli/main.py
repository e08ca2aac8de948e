"""logwatcher CLI — Entry point.

Usage:
    logwatcher -f <logfile> -c <keyword> [-c <keyword> ...] -e <command> [options]

Examples:
    logwatcher -f run.log -c "Traceback" -e "notify-send crashed" --ppid $$
    logwatcher -f build.log -c READY --missing --check-once --check-at-start -e ./alert.sh
    logwatcher -f app.log -c ERROR -c FATAL --stay -t 60 -e "mail -s app admin < /dev/null"

Exit status: 0 when the command was triggered, the timeout was reached, or
help/version was shown; 1 for bad arguments, a missing log file, a dead
parent process, or a failed fork.
"""

from __future__ import annotations

import os
import socket
import sys
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from logwatcher import __version__
from logwatcher.config import Settings, override_settings
from logwatcher.exceptions import ConfigurationError, DaemonizeError
from logwatcher.logging import bind_watch_context, configure_logging, get_logger
from logwatcher.models import ProgramIdentity, WatchConfig
from logwatcher.watch.builder import WatchOptions, build_watch_config
from logwatcher.watch.condition import describe_condition
from logwatcher.watch.daemon import daemonize
from logwatcher.watch.scheduler import WatchLoop

app = typer.Typer(
    name="logwatcher",
    help="Watch a log file for keywords and execute a command when they appear or go missing.",
    add_completion=False,
    pretty_exceptions_enable=False,
)

console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)
log = get_logger(__name__)


def current_identity() -> ProgramIdentity:
    return ProgramIdentity.from_argv0(sys.argv[0] if sys.argv else None)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{current_identity().name} {__version__}")
        raise typer.Exit()


def timeout_display_minutes(timeout_seconds: int) -> int:
    """Minutes shown in the banner, rounded up."""
    minutes, rest = divmod(timeout_seconds, 60)
    return minutes + 1 if rest else minutes


def render_banner(config: WatchConfig, identity: ProgramIdentity, pid: int, hostname: str) -> list[str]:
    """Startup summary.  Every line ends with the ignore token."""
    token = identity.ignore_token
    rule = f"--- {identity.upper_name} --- -- {token}"
    condition = describe_condition(config.keywords, config.trigger_on_found, config.require_all)
    return [
        rule,
        f" PID {pid} on {hostname} -- {token}",
        f' Monitor "{config.logfile}" -- {token}',
        f" Every {config.interval_seconds} seconds -- {token}",
        f' It will execute "{config.command}", -- {token}',
        f" {condition} -- {token}",
        f" Timeout in ~{timeout_display_minutes(config.timeout_seconds)} minutes -- {token}",
        rule,
    ]


def _startup_error(identity: ProgramIdentity, message: str) -> NoReturn:
    err_console.print(
        f"[red]{identity.upper_name}::ERROR -- {escape(message)}[/red] -- {escape(identity.ignore_token)}"
    )
    raise typer.Exit(1)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def watch(
    logfile: Annotated[
        Path | None, typer.Option("--logfile", "-f", help="Log file to monitor (may not exist yet).")
    ] = None,
    catch: Annotated[
        list[str] | None,
        typer.Option("--catch", "-c", help="Keyword to look for. Repeat for several keywords."),
    ] = None,
    execute: Annotated[
        str | None, typer.Option("--execute", "-e", help="Shell command to run when triggered.")
    ] = None,
    interval: Annotated[
        int | None, typer.Option("--interval", "-n", help="Seconds between checks.")
    ] = None,
    timeout: Annotated[
        int | None, typer.Option("--timeout", "-t", help="Give up after this many minutes.")
    ] = None,
    missing: Annotated[
        bool, typer.Option("--missing", help="Trigger when keywords are missing instead of found.")
    ] = False,
    require_all: Annotated[
        bool, typer.Option("--all", help="Require all keywords instead of any of them.")
    ] = False,
    stay: Annotated[
        bool, typer.Option("--stay", help="Keep monitoring after a trigger until the timeout.")
    ] = False,
    check_once: Annotated[
        bool, typer.Option("--check-once", help="Check exactly once, then exit.")
    ] = False,
    check_at_start: Annotated[
        bool, typer.Option("--check-at-start", help="Do the first check immediately.")
    ] = False,
    foreground: Annotated[
        bool, typer.Option("--foreground", help="Stay in the foreground instead of detaching.")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Report every check and the timeout.")
    ] = False,
    ppid: Annotated[
        list[int] | None,
        typer.Option(
            "--ppid",
            help="PID to guard instead of the parent process, i.e. ${PPID}. Only the first one given counts.",
        ),
    ] = None,
    config: Annotated[
        Path | None, typer.Option("--config", help="Extra YAML settings file.")
    ] = None,
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=_version_callback, is_eager=True, help="Show version and exit."),
    ] = None,
) -> None:
    """Monitor a log file and execute a command once keywords are found (or missing)."""
    identity = current_identity()
    try:
        settings = Settings.load(config_file=config)
    except ConfigurationError as exc:
        _startup_error(identity, exc.message)
    override_settings(settings)
    configure_logging(
        level=settings.logging.level,
        format=settings.logging.format,
        log_file=str(settings.logging.file) if settings.logging.file else None,
    )
    bind_watch_context(ignore_token=identity.ignore_token)

    options = WatchOptions(
        logfile=logfile,
        keywords=list(catch or []),
        command=execute,
        interval_seconds=interval,
        timeout_minutes=timeout,
        missing=missing,
        require_all=require_all,
        stay=stay,
        check_once=check_once,
        check_at_start=check_at_start,
        foreground=foreground,
        verbose=verbose,
        ppid=ppid[0] if ppid else None,
    )
    try:
        watch_config = build_watch_config(options, settings, identity)
    except ConfigurationError as exc:
        _startup_error(identity, exc.message)

    if not watch_config.foreground:
        try:
            daemonize()
        except DaemonizeError as exc:
            err_console.print(
                f"[red]SYSTEM::ERROR -- {escape(exc.message)}[/red] -- {escape(identity.ignore_token)}"
            )
            raise typer.Exit(1)

    for line in render_banner(watch_config, identity, os.getpid(), socket.gethostname()):
        console.print(escape(line))

    bind_watch_context(pid=os.getpid(), logfile=str(watch_config.logfile))
    outcome = WatchLoop(watch_config).run()
    log.debug("watch_finished", phase=outcome.phase.value, ticks=outcome.ticks, exit_code=outcome.exit_code)
    raise typer.Exit(outcome.exit_code)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit status.

    Usage errors (unknown option, missing value) are printed to stderr by
    click and exit 1 rather than click's default 2.
    """
    command = typer.main.get_command(app)
    try:
        command.main(args=argv, prog_name=current_identity().name, standalone_mode=True)
    except SystemExit as exc:
        if exc.code == 2:
            return 1
        return exc.code if isinstance(exc.code, int) else 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
