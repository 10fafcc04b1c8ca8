"""Pure aggregations of logged sessions by local calendar day."""

from __future__ import annotations

import datetime as dt
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Sequence

from pomodoro.constants import END_REASON_COMPLETED
from pomodoro.models import Session

DEFAULT_STATS_DAYS = 7


@dataclass(frozen=True)
class ReportEntry:
    """One itemized session row of the daily report."""
    index: int
    start_clock: str
    end_clock: str
    minutes: float
    label: str
    end_reason: str


@dataclass(frozen=True)
class DayReport:
    day: dt.date
    total_seconds: int
    entries: tuple[ReportEntry, ...]

    @property
    def total_minutes(self) -> float:
        return _minutes(self.total_seconds)


@dataclass(frozen=True)
class DayTotal:
    day: dt.date
    total_seconds: int

    @property
    def minutes(self) -> float:
        return _minutes(self.total_seconds)


def today_report(sessions: Iterable[Session], now: dt.datetime) -> DayReport:
    """Sessions whose local start date is today, in log order."""
    today = _local_day(now)
    todays = [session for session in sessions if _local_day(session.start_time) == today]
    entries = tuple(
        ReportEntry(
            index=position,
            start_clock=session.start_time.astimezone().strftime("%H:%M"),
            end_clock=session.end_time.astimezone().strftime("%H:%M"),
            minutes=_minutes(session.elapsed_seconds),
            label=session.label,
            end_reason=session.end_reason or END_REASON_COMPLETED,
        )
        for position, session in enumerate(todays, start=1)
    )
    return DayReport(
        day=today,
        total_seconds=sum(session.elapsed_seconds for session in todays),
        entries=entries,
    )


def last_n_days(
    sessions: Iterable[Session],
    now: dt.datetime,
    days: int = DEFAULT_STATS_DAYS,
) -> Sequence[DayTotal]:
    """Exactly `days` consecutive calendar days ending today, newest first."""
    if days < 1:
        raise ValueError(f"days must be >= 1, got: {days}")

    totals: dict[dt.date, int] = defaultdict(int)
    for session in sessions:
        totals[_local_day(session.start_time)] += session.elapsed_seconds

    today = _local_day(now)
    # Step by calendar date, not by 24h, so DST changes never skip a day.
    return [
        DayTotal(day=day, total_seconds=totals.get(day, 0))
        for day in (today - dt.timedelta(days=offset) for offset in range(days))
    ]


def _local_day(value: dt.datetime) -> dt.date:
    return value.astimezone().date()


def _minutes(seconds: int) -> float:
    return round(seconds / 60.0, 1)
