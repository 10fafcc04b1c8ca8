"""Read-only daily and weekly aggregation over the session log."""

from .service import (
    DEFAULT_STATS_DAYS,
    DayReport,
    DayTotal,
    ReportEntry,
    last_n_days,
    today_report,
)

__all__ = [
    "DEFAULT_STATS_DAYS",
    "DayReport",
    "DayTotal",
    "ReportEntry",
    "last_n_days",
    "today_report",
]
