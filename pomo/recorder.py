"""Session history: one record per completed period."""

from __future__ import annotations

import logging
import threading
import time

from pomo.errors import PersistenceError
from pomo.models import PomodoroSession
from pomo.stores import SessionStore

log = logging.getLogger(__name__)

_id_lock = threading.Lock()
_last_id = 0


def new_session_id() -> str:
    """Return a session id derived from the clock, unique for this process.

    Ids are epoch milliseconds; two calls within the same millisecond (or
    after the clock steps backwards) get the next free value instead.
    """
    global _last_id
    with _id_lock:
        candidate = time.time_ns() // 1_000_000
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
    return str(candidate)


class SessionRecorder:
    """Appends completed sessions to a store and keeps the history in memory."""

    def __init__(self, store: SessionStore) -> None:
        self._store = store
        self._history: list[PomodoroSession] = []

    def load(self) -> list[PomodoroSession]:
        """Read the stored history. An unreadable store leaves an empty history."""
        try:
            self._history = list(self._store.load_all())
        except PersistenceError:
            log.warning("Session history unavailable; starting empty", exc_info=True)
            self._history = []
        return self.list_all()

    def record(self, session: PomodoroSession) -> PomodoroSession:
        """Append *session* and persist it.

        The in-memory history always keeps the record. If the store fails,
        :class:`PersistenceError` is raised after the record was kept.
        """
        self._history.append(session)
        self._store.append(session)
        log.debug("Recorded %s session %s", session.mode.value, session.id)
        return session

    def list_all(self) -> list[PomodoroSession]:
        """Full history in insertion order, most recent last."""
        return list(self._history)

    def recent(self, limit: int = 5) -> list[PomodoroSession]:
        """The latest *limit* sessions, most recent first."""
        if limit <= 0:
            return []
        return list(reversed(self._history[-limit:]))

    def __len__(self) -> int:
        return len(self._history)
