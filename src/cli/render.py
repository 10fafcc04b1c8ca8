"""Rich console rendering for command results and reports."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pomodoro import SessionActionResult, SessionStatus, format_remaining
from pomodoro.constants import PHASE_JUST_COMPLETED, PHASE_RUNNING
from reporting import DayReport, DayTotal

SEPARATOR = "-" * 50


def _console() -> Console:
    # Created per call so terminal detection follows the current stdout.
    return Console(highlight=False)


def render_message(message: str) -> None:
    _console().print(escape(message))


def render_started(result: SessionActionResult) -> None:
    slot = result.slot
    minutes = slot.planned_minutes if slot is not None else 0
    _console().print(f"Started: {escape(result.label or '')} ({minutes} min)")
    _console().print("[dim]Tip: run `pomo status` anytime to see time left.[/dim]")


def render_status(status: SessionStatus) -> None:
    if status.phase == PHASE_RUNNING:
        _console().print(
            f"Running: {escape(status.label or '')} | "
            f"{format_remaining(status.remaining_seconds)} left "
            f"(planned {status.planned_minutes} min)"
        )
        return
    if status.phase == PHASE_JUST_COMPLETED:
        _console().print(f"[green]Time's up![/green] Saved session: {escape(status.label or '')}")
        return
    if status.already_saved:
        _console().print("No active session (already saved).")
        return
    _console().print("No active session.")


def render_stopped(result: SessionActionResult) -> None:
    if not result.accepted:
        _console().print("No active session to stop.")
        return
    minutes = result.session.elapsed_minutes if result.session is not None else 0.0
    _console().print(f"Stopped and saved: {escape(result.label or '')} ({minutes} min)")


def render_cancelled(result: SessionActionResult) -> None:
    if not result.accepted:
        _console().print("No active session to cancel.")
        return
    _console().print(f"Cancelled (not saved): {escape(result.label or '')}")


def render_today(report: DayReport) -> None:
    _console().print(
        f"Today ({report.day.isoformat()}): {report.total_minutes} focused minutes"
    )
    _console().print(SEPARATOR)
    if not report.entries:
        _console().print("No sessions yet.")
        return
    for entry in report.entries:
        _console().print(
            f"{entry.index}. {entry.start_clock}-{entry.end_clock}  "
            f"{entry.minutes} min  | {escape(entry.label)}  ({entry.end_reason})"
        )


def render_stats(totals: Sequence[DayTotal]) -> None:
    table = Table(title=f"Last {len(totals)} days", title_justify="left")
    table.add_column("Day")
    table.add_column("Minutes", justify="right")
    for row in totals:
        table.add_row(row.day.isoformat(), f"{row.minutes} min")
    _console().print(table)


def render_error(message: str) -> None:
    _console().print(f"[red]Error:[/red] {escape(message)}")
