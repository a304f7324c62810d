"""Tests for the settings and in-memory stores."""

from __future__ import annotations

from pathlib import Path

import pytest

from pomo.errors import PersistenceError
from pomo.models import TimerSettings
from pomo.stores import JsonSettingsStore, MemorySessionStore, MemorySettingsStore


class TestJsonSettingsStore:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        store = JsonSettingsStore(tmp_path / "settings.json")
        assert store.load() == TimerSettings()

    def test_save_and_load(self, tmp_path: Path) -> None:
        store = JsonSettingsStore(tmp_path / "nested" / "settings.json")
        store.save(TimerSettings(work_duration=50, break_duration=10))
        assert store.path.exists()
        loaded = JsonSettingsStore(store.path).load()
        assert loaded.work_duration == 50
        assert loaded.break_duration == 10

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("not valid json{{{")
        with pytest.raises(PersistenceError):
            JsonSettingsStore(path).load()

    def test_stored_bad_values_clamped(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text('{"work_duration": 0, "break_duration": "x"}')
        loaded = JsonSettingsStore(path).load()
        assert loaded.work_duration == 1
        assert loaded.break_duration == 1

    def test_unwritable_location_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        store = JsonSettingsStore(blocker / "settings.json")
        with pytest.raises(PersistenceError):
            store.save(TimerSettings())


class TestMemoryStores:
    def test_settings(self) -> None:
        store = MemorySettingsStore()
        store.save(TimerSettings(work_duration=30))
        assert store.load().work_duration == 30

    def test_sessions_load_returns_copy(self) -> None:
        store = MemorySessionStore()
        store.load_all().append("junk")  # type: ignore[arg-type]
        assert store.load_all() == []
