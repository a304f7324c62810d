"""SQLite session history. All public functions return Pydantic models."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from pomo.config import get_db_path as _config_get_db_path
from pomo.errors import PersistenceError
from pomo.models import PomodoroSession, TimerMode

_SCHEMA = """
CREATE TABLE IF NOT EXISTS sessions (
    seq              INTEGER PRIMARY KEY AUTOINCREMENT,
    id               TEXT    NOT NULL UNIQUE,
    mode             TEXT    NOT NULL,
    duration_seconds INTEGER NOT NULL,
    completed_at     TEXT    NOT NULL,
    date             TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS sessions_date ON sessions (date);
"""


def _get_db_path() -> Path:
    """Return the database file path from config (or default)."""
    return _config_get_db_path()


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Open a connection and ensure the schema exists."""
    path = db_path or _get_db_path()
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.executescript(_SCHEMA)
    return conn


def _row_to_session(row: sqlite3.Row) -> PomodoroSession:
    """Convert a database row to a PomodoroSession model."""
    return PomodoroSession(
        id=row["id"],
        mode=TimerMode(row["mode"]),
        duration_seconds=row["duration_seconds"],
        completed_at=datetime.fromisoformat(row["completed_at"]),
        date=row["date"],
    )


def add_session(conn: sqlite3.Connection, session: PomodoroSession) -> None:
    """Append a completed session."""
    conn.execute(
        "INSERT INTO sessions (id, mode, duration_seconds, completed_at, date) "
        "VALUES (?, ?, ?, ?, ?)",
        (
            session.id,
            session.mode.value,
            session.duration_seconds,
            session.completed_at.isoformat(),
            session.date,
        ),
    )
    conn.commit()


def list_sessions(conn: sqlite3.Connection) -> list[PomodoroSession]:
    """List every session in the order it was recorded (most recent last)."""
    rows = conn.execute("SELECT * FROM sessions ORDER BY seq ASC").fetchall()
    return [_row_to_session(r) for r in rows]


def count_sessions(conn: sqlite3.Connection, mode: Optional[TimerMode] = None) -> int:
    """Count recorded sessions, optionally for one mode only."""
    if mode is None:
        row = conn.execute("SELECT COUNT(*) AS n FROM sessions").fetchone()
    else:
        row = conn.execute(
            "SELECT COUNT(*) AS n FROM sessions WHERE mode = ?", (mode.value,)
        ).fetchone()
    return row["n"]


class SqliteSessionStore:
    """Session store backed by the SQLite database.

    A connection is opened per call so the store can be used from the
    ticker thread and the asyncio actor alike.
    """

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self.db_path = db_path

    def load_all(self) -> list[PomodoroSession]:
        try:
            conn = get_connection(self.db_path)
            try:
                return list_sessions(conn)
            finally:
                conn.close()
        except (sqlite3.Error, OSError, ValueError) as exc:
            raise PersistenceError("Could not read session history") from exc

    def append(self, session: PomodoroSession) -> None:
        try:
            conn = get_connection(self.db_path)
            try:
                add_session(conn, session)
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceError(f"Could not save session {session.id}") from exc
