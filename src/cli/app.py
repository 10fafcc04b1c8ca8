"""Typer commands: start, status, stop, cancel, today, stats (+ internal autostop)."""

import logging
import re
from pathlib import Path
from typing import List, Optional

import typer

from app_config import AppConfigurationError, load_app_config
from app_config_parser import log_level
from notify import NotifierConfigurationError
from pomodoro import InvalidDurationError, SessionAlreadyActiveError
from reporting import last_n_days, today_report
from scheduler import SchedulerConfigurationError, wait_and_autostop
from storage import StorageError

from . import render
from .runtime import CliRuntime, build_runtime

AUTOSTOP_COMMAND = "autostop"
_LEADING_INT = re.compile(r"\s*[+-]?\d+")

app = typer.Typer(
    help="Pomodoro focus sessions with daily and weekly stats.",
    no_args_is_help=True,
    add_completion=False,
)


def setup_logging(
    level: int = logging.WARNING,
    *,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure logging; the detached auto-stop process writes to a file."""
    options = {}
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        options["filename"] = log_file
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
        **options,
    )
    return logging.getLogger("pomo")


def _runtime(ctx: typer.Context) -> CliRuntime:
    return ctx.obj


def parse_minutes(raw: str) -> int:
    """Read the leading integer of `raw`, so `25.5` and `25m` mean 25; 0 if none."""
    match = _LEADING_INT.match(raw)
    return int(match.group(0)) if match else 0


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to config.toml (defaults to $POMO_CONFIG_FILE or ./config.toml).",
    ),
) -> None:
    """Track focused-work sessions."""
    if isinstance(ctx.obj, CliRuntime):
        return

    try:
        app_config = load_app_config(str(config) if config else None)
    except AppConfigurationError as error:
        setup_logging()
        render.render_error(f"App configuration error: {error}")
        raise typer.Exit(1)

    background = ctx.invoked_subcommand == AUTOSTOP_COMMAND
    logger = setup_logging(
        log_level(app_config.logging),
        log_file=app_config.logging.log_file if background else None,
    )
    if app_config.source_file:
        logger.debug("Loaded runtime config: %s", app_config.source_file)

    try:
        ctx.obj = build_runtime(app_config)
    except (StorageError, SchedulerConfigurationError, NotifierConfigurationError) as error:
        logger.error("Configuration error: %s", error)
        if not background:
            render.render_error(f"Configuration error: {error}")
        raise typer.Exit(1)


@app.command()
def start(
    ctx: typer.Context,
    minutes: str = typer.Argument(..., help="Planned duration in minutes (> 0)."),
    label: Optional[List[str]] = typer.Argument(None, help="What you are focusing on."),
) -> None:
    """Start a session and return immediately; a background timer auto-stops it."""
    runtime = _runtime(ctx)
    planned = parse_minutes(minutes)
    try:
        result = runtime.service.start(planned, " ".join(label or []))
    except InvalidDurationError:
        render.render_message("Please provide minutes > 0.")
        raise typer.Exit(1)
    except SessionAlreadyActiveError:
        render.render_message("A session is already running. Run: pomo status or pomo stop")
        raise typer.Exit(1)
    render.render_started(result)


@app.command()
def status(ctx: typer.Context) -> None:
    """Show the time left, saving the session if it has already expired."""
    render.render_status(_runtime(ctx).service.status())


@app.command()
def stop(ctx: typer.Context) -> None:
    """Stop the running session early and save it."""
    render.render_stopped(_runtime(ctx).service.stop())


@app.command()
def cancel(ctx: typer.Context) -> None:
    """Discard the running session without saving it."""
    render.render_cancelled(_runtime(ctx).service.cancel())


@app.command()
def today(ctx: typer.Context) -> None:
    """Show today's focused minutes and sessions."""
    runtime = _runtime(ctx)
    report = today_report(runtime.store.load_sessions(), runtime.clock.now())
    render.render_today(report)


@app.command()
def stats(
    ctx: typer.Context,
    days: Optional[int] = typer.Option(
        None,
        "--days",
        min=1,
        help="Number of days to show (defaults to reporting.stats_days).",
    ),
) -> None:
    """Show focused minutes per day for the last days, newest first."""
    runtime = _runtime(ctx)
    window = days or runtime.config.reporting.stats_days
    totals = last_n_days(runtime.store.load_sessions(), runtime.clock.now(), window)
    render.render_stats(totals)


@app.command(name=AUTOSTOP_COMMAND, hidden=True)
def autostop(
    ctx: typer.Context,
    identity: str = typer.Argument(..., help="Start timestamp of the tagged session."),
    after: float = typer.Option(0.0, "--after", min=0.0, help="Seconds to wait first."),
) -> None:
    """Internal: finalize the tagged session once it has expired. Silent."""
    runtime = _runtime(ctx)
    wait_and_autostop(
        runtime.service,
        identity.strip(),
        after,
        max_rounds=runtime.scheduler.max_rounds,
        logger=logging.getLogger("scheduler"),
    )
