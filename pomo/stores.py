"""Storage contracts for settings and session history, plus simple backends.

The engine never talks to a storage backend directly. It is handed objects
satisfying :class:`SettingsStore` and :class:`SessionStore`; the SQLite
session store lives in :mod:`pomo.db`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from pomo.errors import PersistenceError
from pomo.models import PomodoroSession, TimerSettings

log = logging.getLogger(__name__)


class SettingsStore(Protocol):
    def load(self) -> TimerSettings: ...

    def save(self, settings: TimerSettings) -> None: ...


class SessionStore(Protocol):
    def load_all(self) -> list[PomodoroSession]: ...

    def append(self, session: PomodoroSession) -> None: ...


class JsonSettingsStore:
    """Timer settings kept in a small JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> TimerSettings:
        """Read settings, returning defaults when the file does not exist yet."""
        if not self.path.exists():
            return TimerSettings()
        try:
            data = json.loads(self.path.read_text())
            return TimerSettings(**data)
        except (OSError, json.JSONDecodeError, TypeError, ValidationError) as exc:
            raise PersistenceError(f"Could not read settings from {self.path}") from exc

    def save(self, settings: TimerSettings) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(settings.model_dump_json(indent=2))
        except OSError as exc:
            raise PersistenceError(f"Could not write settings to {self.path}") from exc
        log.debug("Saved settings to %s", self.path)


class MemorySettingsStore:
    """Keeps settings in memory only."""

    def __init__(self, settings: Optional[TimerSettings] = None) -> None:
        self.settings = settings or TimerSettings()

    def load(self) -> TimerSettings:
        return self.settings

    def save(self, settings: TimerSettings) -> None:
        self.settings = settings


class MemorySessionStore:
    """Keeps session history in memory only."""

    def __init__(self, sessions: Optional[list[PomodoroSession]] = None) -> None:
        self.sessions: list[PomodoroSession] = list(sessions or [])

    def load_all(self) -> list[PomodoroSession]:
        return list(self.sessions)

    def append(self, session: PomodoroSession) -> None:
        self.sessions.append(session)
