import datetime as dt
import json
import tempfile
import unittest
from pathlib import Path

from pomodoro import ActiveSlot, Session
from storage import JsonDocument, SessionStore, StorageError, StoreConfig

START = dt.datetime(2026, 10, 19, 10, 0, 0).astimezone()


def _session(label: str, seconds: int) -> Session:
    return Session(
        start_time=START,
        end_time=START + dt.timedelta(seconds=seconds),
        planned_minutes=25,
        elapsed_seconds=seconds,
        label=label,
        end_reason="completed",
    )


class SessionStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self._temp_dir.cleanup)
        self.root = Path(self._temp_dir.name)
        self.store = SessionStore(StoreConfig(data_dir=str(self.root)))

    def test_missing_documents_mean_empty_log_and_no_slot(self) -> None:
        self.assertEqual([], self.store.load_sessions())
        self.assertIsNone(self.store.load_active())

    def test_append_keeps_log_order_and_is_human_readable(self) -> None:
        self.store.append_session(_session("first", 600))
        self.store.append_session(_session("second", 1500))

        labels = [session.label for session in self.store.load_sessions()]
        self.assertEqual(["first", "second"], labels)
        text = (self.root / "pomo_sessions.json").read_text(encoding="utf-8")
        self.assertIn('\n  {\n    "start_time"', text)

    def test_active_slot_save_load_clear(self) -> None:
        slot = ActiveSlot(start_time=START, planned_minutes=25, label="Focus")

        self.store.save_active(slot)
        self.assertEqual(slot, self.store.load_active())
        self.assertTrue(self.store.clear_active())
        self.assertIsNone(self.store.load_active())
        self.assertFalse(self.store.clear_active())

    def test_corrupt_active_document_falls_back_to_no_session(self) -> None:
        (self.root / "pomo_active.json").write_text("{not json", encoding="utf-8")

        with self.assertLogs("storage", level="WARNING"):
            self.assertIsNone(self.store.load_active())

    def test_schema_violating_active_document_falls_back_to_no_session(self) -> None:
        (self.root / "pomo_active.json").write_text(
            json.dumps({"start_time": "soon", "planned_minutes": -1}),
            encoding="utf-8",
        )

        with self.assertLogs("storage", level="WARNING"):
            self.assertIsNone(self.store.load_active())

    def test_corrupt_log_reads_empty_and_is_moved_aside_on_append(self) -> None:
        log_path = self.root / "pomo_sessions.json"
        log_path.write_text("[{broken", encoding="utf-8")

        with self.assertLogs("storage", level="WARNING"):
            self.assertEqual([], self.store.load_sessions())
        with self.assertLogs("storage", level="WARNING"):
            self.store.append_session(_session("fresh", 300))

        self.assertEqual(["fresh"], [s.label for s in self.store.load_sessions()])
        quarantined = list(self.root.glob("pomo_sessions.json.corrupt-*"))
        self.assertEqual(1, len(quarantined))
        self.assertEqual("[{broken", quarantined[0].read_text(encoding="utf-8"))

    def test_invalid_entries_are_skipped_on_read_but_preserved_on_append(self) -> None:
        log_path = self.root / "pomo_sessions.json"
        log_path.write_text(json.dumps([{"label": "legacy"}]), encoding="utf-8")

        with self.assertLogs("storage", level="WARNING"):
            self.assertEqual([], self.store.load_sessions())
        self.store.append_session(_session("new", 60))

        raw = json.loads(log_path.read_text(encoding="utf-8"))
        self.assertEqual(2, len(raw))
        self.assertEqual({"label": "legacy"}, raw[0])

    def test_locked_is_reusable(self) -> None:
        with self.store.locked():
            self.store.save_active(
                ActiveSlot(start_time=START, planned_minutes=5, label="A")
            )
        with self.store.locked():
            self.assertTrue(self.store.clear_active())
        self.assertTrue((self.root / "pomo.lock").exists())


class StoreConfigTests(unittest.TestCase):
    def test_rejects_empty_data_dir(self) -> None:
        with self.assertRaises(StorageError):
            StoreConfig(data_dir=" ")

    def test_rejects_colliding_file_names(self) -> None:
        with self.assertRaises(StorageError):
            StoreConfig(data_dir="/tmp/x", sessions_file="a.json", active_file="a.json")


class JsonDocumentTests(unittest.TestCase):
    def test_write_creates_parent_and_leaves_no_temp_files(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "nested" / "doc.json"
            document = JsonDocument(path)

            document.write({"a": 1})
            document.write({"a": 2})

            self.assertEqual({"a": 2}, document.read())
            self.assertEqual(["doc.json"], sorted(p.name for p in path.parent.iterdir()))

    def test_empty_file_reads_as_default(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "doc.json"
            path.write_text("  \n", encoding="utf-8")

            self.assertEqual([], JsonDocument(path).read(default=[]))


if __name__ == "__main__":
    unittest.main()
