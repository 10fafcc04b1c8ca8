import datetime as dt
import json
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from app_config import load_app_config
from cli import app, build_runtime
from pomodoro import SessionStatus

T0 = dt.datetime(2026, 10, 19, 9, 0, 0).astimezone()


class _FakeClock:
    def __init__(self, start: dt.datetime):
        self.current = start

    def now(self) -> dt.datetime:
        return self.current


class _RecordingDispatcher:
    def __init__(self):
        self.calls: list[tuple[int, str]] = []

    def schedule(self, delay_seconds: int, identity: str) -> None:
        self.calls.append((delay_seconds, identity))


class CliCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self._temp_dir.cleanup)
        self.root = Path(self._temp_dir.name)
        self.config_path = self.root / "config.toml"
        self.config_path.write_text(
            textwrap.dedent(
                """
                [storage]
                data_dir = "data"

                [scheduler]
                enabled = false

                [notification]
                enabled = false
                """
            ).strip(),
            encoding="utf-8",
        )
        self.clock = _FakeClock(T0)
        self.dispatcher = _RecordingDispatcher()
        self.runtime = build_runtime(
            load_app_config(str(self.config_path)),
            clock=self.clock,
            dispatcher=self.dispatcher,
        )
        self.runner = CliRunner()

    def _invoke(self, *args: str):
        return self.runner.invoke(app, list(args), obj=self.runtime)

    def test_start_prints_confirmation_and_schedules_autostop(self) -> None:
        result = self._invoke("start", "25", "ML2", "quiz")

        self.assertEqual(0, result.exit_code, result.output)
        self.assertIn("Started: ML2 quiz (25 min)", result.output)
        self.assertEqual(1, len(self.dispatcher.calls))
        self.assertEqual(1500, self.dispatcher.calls[0][0])

    def test_start_rejects_bad_minutes(self) -> None:
        for minutes in ("0", "abc"):
            with self.subTest(minutes=minutes):
                result = self._invoke("start", minutes)

                self.assertEqual(1, result.exit_code)
                self.assertIn("Please provide minutes > 0.", result.output)

    def test_start_reads_leading_whole_minutes(self) -> None:
        for minutes in ("25.5", "25m"):
            with self.subTest(minutes=minutes):
                result = self._invoke("start", minutes, "Reading")

                self.assertEqual(0, result.exit_code, result.output)
                self.assertIn("Started: Reading (25 min)", result.output)
                self._invoke("cancel")
        self.assertEqual([1500, 1500], [delay for delay, _ in self.dispatcher.calls])

    def test_second_start_fails_with_hint(self) -> None:
        self._invoke("start", "25")

        result = self._invoke("start", "10", "Other")

        self.assertEqual(1, result.exit_code)
        self.assertIn("already running", result.output)

    def test_status_running_then_completed(self) -> None:
        self._invoke("start", "25", "Write", "report")

        self.clock.current = T0 + dt.timedelta(minutes=10)
        running = self._invoke("status")
        self.assertIn("15:00 left", running.output)

        self.clock.current = T0 + dt.timedelta(minutes=30)
        done = self._invoke("status")
        self.assertIn("Time's up! Saved session: Write report", done.output)

        idle = self._invoke("status")
        self.assertIn("No active session.", idle.output)

    def test_status_when_session_was_saved_elsewhere(self) -> None:
        raced = SessionStatus(phase="idle", already_saved=True)
        with patch.object(self.runtime.service, "status", return_value=raced):
            result = self._invoke("status")

        self.assertEqual(0, result.exit_code)
        self.assertIn("No active session (already saved).", result.output)

    def test_stop_and_cancel_outcomes(self) -> None:
        self.assertIn("No active session to stop.", self._invoke("stop").output)
        self.assertIn("No active session to cancel.", self._invoke("cancel").output)

        self._invoke("start", "25", "Draft")
        self.clock.current = T0 + dt.timedelta(minutes=20)
        stopped = self._invoke("stop")
        self.assertEqual(0, stopped.exit_code)
        self.assertIn("Stopped and saved: Draft (20.0 min)", stopped.output)

        self._invoke("start", "5", "Throwaway")
        cancelled = self._invoke("cancel")
        self.assertIn("Cancelled (not saved): Throwaway", cancelled.output)

        log = json.loads((self.root / "data" / "pomo_sessions.json").read_text(encoding="utf-8"))
        self.assertEqual(1, len(log))
        self.assertEqual("stopped_early", log[0]["end_reason"])
        self.assertEqual(1200, log[0]["elapsed_seconds"])

    def test_today_and_stats_on_empty_log(self) -> None:
        today = self._invoke("today")
        self.assertIn("0.0 focused minutes", today.output)
        self.assertIn("No sessions yet.", today.output)

        stats = self._invoke("stats")
        self.assertEqual(0, stats.exit_code, stats.output)
        self.assertEqual(7, stats.output.count("0.0 min"))
        self.assertIn(T0.date().isoformat(), stats.output)

    def test_today_lists_finalized_sessions(self) -> None:
        self._invoke("start", "25", "Email")
        self.clock.current = T0 + dt.timedelta(minutes=10)
        self._invoke("stop")
        self.clock.current = T0 + dt.timedelta(hours=1)
        self._invoke("start", "25", "Write")
        self.clock.current = T0 + dt.timedelta(hours=1, minutes=25)
        self._invoke("status")

        result = self._invoke("today")

        self.assertIn("35.0 focused minutes", result.output)
        self.assertIn("1. 09:00-09:10  10.0 min  | Email  (stopped_early)", result.output)
        self.assertIn("2. 10:00-10:25  25.0 min  | Write  (completed)", result.output)

    def test_stats_days_option(self) -> None:
        result = self._invoke("stats", "--days", "3")

        self.assertEqual(3, result.output.count("0.0 min"))

    def test_autostop_finalizes_matching_session_silently(self) -> None:
        self._invoke("start", "1", "Timer")
        identity = self.dispatcher.calls[0][1]
        self.clock.current = T0 + dt.timedelta(minutes=1)

        result = self._invoke("autostop", identity)

        self.assertEqual(0, result.exit_code, result.output)
        self.assertEqual("", result.output)
        self.assertEqual(1, len(self.runtime.store.load_sessions()))

    def test_autostop_with_stale_identity_is_silent_noop(self) -> None:
        self._invoke("start", "1", "Current")
        self.clock.current = T0 + dt.timedelta(minutes=5)

        result = self._invoke("autostop", "2026-01-01T00:00:00+00:00")

        self.assertEqual(0, result.exit_code)
        self.assertEqual("", result.output)
        self.assertIsNotNone(self.runtime.store.load_active())

    def test_config_option_builds_runtime_from_file(self) -> None:
        with patch("cli.app.setup_logging"):
            result = self.runner.invoke(app, ["--config", str(self.config_path), "status"])

        self.assertEqual(0, result.exit_code, result.output)
        self.assertIn("No active session.", result.output)

    def test_missing_config_file_exits_with_error(self) -> None:
        with patch("cli.app.setup_logging"):
            result = self.runner.invoke(
                app,
                ["--config", str(self.root / "missing.toml"), "status"],
            )

        self.assertEqual(1, result.exit_code)
        self.assertIn("App configuration error", result.output)


if __name__ == "__main__":
    unittest.main()
