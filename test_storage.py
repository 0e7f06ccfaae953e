"""Persistence round trips for blocked dates and settings, on temp files."""

import json
import os
import tempfile
import unittest
from datetime import date
from functools import partial

from blocked_dates import BlockedDateSet
from save_status import PersistenceFailure, SaveStatusTracker
from settings import load_settings, save_settings
from storage import (
    BackupFormatError,
    clear_storage,
    export_data,
    import_data,
    load_blocked_dates,
    save_blocked_dates,
)
from test_save_status import ManualTimer


class StorageTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "blocked.json")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_file_format(self) -> None:
        save_blocked_dates({date(2026, 1, 16), date(2026, 1, 15)}, self.path)
        with open(self.path, encoding="utf-8") as f:
            stored = json.load(f)
        self.assertEqual(stored["version"], 1)
        self.assertEqual(stored["blockedDates"], ["2026-01-15", "2026-01-16"])
        self.assertIn("lastSync", stored)
        self.assertEqual(os.listdir(self._tmp.name), ["blocked.json"])

    def test_load_saved_dates(self) -> None:
        dates = {date(2026, 1, 15), date(2024, 2, 29)}
        save_blocked_dates(dates, self.path)
        self.assertEqual(load_blocked_dates(self.path), dates)

    def test_save_is_full_replace(self) -> None:
        save_blocked_dates({date(2026, 1, 15)}, self.path)
        save_blocked_dates(set(), self.path)
        self.assertEqual(load_blocked_dates(self.path), set())

    def test_missing_or_corrupt_file_gives_empty_set(self) -> None:
        self.assertEqual(load_blocked_dates(self.path), set())
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with self.assertLogs("storage", level="WARNING"):
            self.assertEqual(load_blocked_dates(self.path), set())
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(["2026-01-15"], f)
        with self.assertLogs("storage", level="WARNING"):
            self.assertEqual(load_blocked_dates(self.path), set())

    def test_malformed_keys_are_skipped(self) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"version": 1, "blockedDates": ["2026-01-15", "2026-02-30", 7]}, f)
        with self.assertLogs("storage", level="WARNING"):
            self.assertEqual(load_blocked_dates(self.path), {date(2026, 1, 15)})

    def test_clear_storage(self) -> None:
        save_blocked_dates({date(2026, 1, 15)}, self.path)
        clear_storage(self.path)
        clear_storage(self.path)
        self.assertFalse(os.path.exists(self.path))

    def test_tracker_persists_every_change(self) -> None:
        dates = BlockedDateSet(load_blocked_dates(self.path))
        tracker = SaveStatusTracker(dates, partial(save_blocked_dates, path=self.path),
                                    ManualTimer())
        dates.block_range(date(2026, 3, 2), date(2026, 3, 4))
        dates.unblock(date(2026, 3, 3))
        self.assertEqual(load_blocked_dates(self.path),
                         {date(2026, 3, 2), date(2026, 3, 4)})
        self.assertIsNotNone(tracker.last_saved)

    def test_unwritable_path_surfaces_persistence_failure(self) -> None:
        # A directory where the file should be makes os.replace fail
        os.mkdir(self.path)
        dates = BlockedDateSet()
        tracker = SaveStatusTracker(dates, partial(save_blocked_dates, path=self.path),
                                    ManualTimer())
        with self.assertRaises(PersistenceFailure):
            dates.block(date(2026, 1, 15))
        self.assertIsNone(tracker.last_saved)
        self.assertEqual(os.listdir(self._tmp.name), ["blocked.json"])


class BackupTests(unittest.TestCase):
    def test_export_matches_file_format(self) -> None:
        stored = json.loads(export_data([date(2026, 1, 16), date(2026, 1, 15)]))
        self.assertEqual(stored["version"], 1)
        self.assertEqual(stored["blockedDates"], ["2026-01-15", "2026-01-16"])

    def test_import_exported_backup(self) -> None:
        dates = {date(2026, 1, 15), date(2024, 2, 29)}
        self.assertEqual(import_data(export_data(dates)), dates)
        self.assertEqual(import_data(export_data([])), set())

    def test_import_replaces_set_through_tracker(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "blocked.json")
            dates = BlockedDateSet([date(2026, 1, 1)])
            SaveStatusTracker(dates, partial(save_blocked_dates, path=path), ManualTimer())
            dates.replace(import_data(export_data([date(2026, 5, 4)])))
            self.assertEqual(load_blocked_dates(path), {date(2026, 5, 4)})

    def test_bad_backups_raise(self) -> None:
        bad = [
            "{not json",
            "[]",
            '{"blockedDates": ["2026-01-15"]}',
            '{"version": 2, "blockedDates": []}',
            '{"version": true, "blockedDates": []}',
            '{"version": 1}',
            '{"version": 1, "blockedDates": "2026-01-15"}',
            '{"version": 1, "blockedDates": ["2026-01-15", "2026-02-30"]}',
            '{"version": 1, "blockedDates": [20260115]}',
        ]
        for text in bad:
            with self.assertRaises(BackupFormatError, msg=text):
                import_data(text)


class SettingsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "settings.json")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_defaults_when_missing(self) -> None:
        settings = load_settings(self.path)
        self.assertIsNone(settings["data_path"])
        self.assertEqual(settings["log_level"], "INFO")

    def test_round_trip_and_validation(self) -> None:
        save_settings({
            "data_path": "/tmp/blocked.json",
            "name": "Dr. Smith",
            "email": 42,
            "log_level": "debug",
            "unknown": True,
        }, self.path)
        settings = load_settings(self.path)
        self.assertEqual(settings["data_path"], "/tmp/blocked.json")
        self.assertEqual(settings["name"], "Dr. Smith")
        self.assertEqual(settings["email"], "")
        self.assertEqual(settings["log_level"], "DEBUG")
        self.assertNotIn("unknown", settings)

    def test_bad_log_level_falls_back(self) -> None:
        save_settings({"log_level": "LOUD"}, self.path)
        self.assertEqual(load_settings(self.path)["log_level"], "INFO")


if __name__ == "__main__":
    unittest.main()
