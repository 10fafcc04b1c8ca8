import datetime as dt
import unittest

from pomodoro import Session
from reporting import last_n_days, today_report

NOW = dt.datetime(2026, 10, 19, 18, 0, 0).astimezone()


def _session(start: dt.datetime, seconds: int, label: str, reason: str = "completed") -> Session:
    return Session(
        start_time=start,
        end_time=start + dt.timedelta(seconds=seconds),
        planned_minutes=25,
        elapsed_seconds=seconds,
        label=label,
        end_reason=reason,
    )


class TodayReportTests(unittest.TestCase):
    def test_empty_log_reports_zero(self) -> None:
        report = today_report([], NOW)

        self.assertEqual(NOW.date(), report.day)
        self.assertEqual(0, report.total_seconds)
        self.assertEqual(0.0, report.total_minutes)
        self.assertEqual((), report.entries)

    def test_two_sessions_today_total_35_minutes_in_log_order(self) -> None:
        sessions = [
            _session(NOW.replace(hour=9, minute=0), 600, "Email"),
            _session(NOW - dt.timedelta(days=1), 3000, "Yesterday"),
            _session(NOW.replace(hour=10, minute=30), 1500, "Write report", "stopped_early"),
        ]

        report = today_report(sessions, NOW)

        self.assertEqual(2100, report.total_seconds)
        self.assertEqual(35.0, report.total_minutes)
        self.assertEqual(2, len(report.entries))
        first, second = report.entries
        self.assertEqual((1, "09:00", "09:10", 10.0, "Email", "completed"), (
            first.index, first.start_clock, first.end_clock,
            first.minutes, first.label, first.end_reason,
        ))
        self.assertEqual(2, second.index)
        self.assertEqual("10:30", second.start_clock)
        self.assertEqual("10:55", second.end_clock)
        self.assertEqual(25.0, second.minutes)
        self.assertEqual("stopped_early", second.end_reason)

    def test_minutes_round_to_one_decimal(self) -> None:
        report = today_report([_session(NOW.replace(hour=8), 100, "Short")], NOW)

        self.assertEqual(1.7, report.entries[0].minutes)


class LastNDaysTests(unittest.TestCase):
    def test_empty_log_yields_seven_zero_rows(self) -> None:
        totals = last_n_days([], NOW)

        self.assertEqual(7, len(totals))
        self.assertTrue(all(row.total_seconds == 0 for row in totals))
        self.assertTrue(all(row.minutes == 0.0 for row in totals))

    def test_rows_are_consecutive_days_newest_first(self) -> None:
        totals = last_n_days([], NOW, days=3)

        self.assertEqual(
            [NOW.date(), NOW.date() - dt.timedelta(days=1), NOW.date() - dt.timedelta(days=2)],
            [row.day for row in totals],
        )

    def test_buckets_by_local_start_day_and_ignores_older_sessions(self) -> None:
        sessions = [
            _session(NOW.replace(hour=8), 600, "a"),
            _session(NOW.replace(hour=12), 900, "b"),
            _session(NOW - dt.timedelta(days=2), 1500, "c"),
            _session(NOW - dt.timedelta(days=30), 1500, "old"),
        ]

        totals = last_n_days(sessions, NOW)

        self.assertEqual(1500, totals[0].total_seconds)
        self.assertEqual(25.0, totals[0].minutes)
        self.assertEqual(0, totals[1].total_seconds)
        self.assertEqual(1500, totals[2].total_seconds)
        self.assertEqual(3000, sum(row.total_seconds for row in totals))

    def test_rejects_non_positive_window(self) -> None:
        with self.assertRaises(ValueError):
            last_n_days([], NOW, days=0)


if __name__ == "__main__":
    unittest.main()
