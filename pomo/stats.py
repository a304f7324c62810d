"""Daily rollups of session history."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta
from typing import Optional

from pomo.models import DailyStat, PomodoroSession, TimerMode


def last_n_days(
    history: Iterable[PomodoroSession], n: int = 7, today: Optional[date] = None
) -> list[DailyStat]:
    """Count sessions per mode for each of the *n* days ending at *today*.

    Every day in the window is present, even without sessions, oldest
    first. Sessions outside the window are ignored.
    """
    if n < 1:
        raise ValueError("n must be at least 1")
    today = today or date.today()
    days = [(today - timedelta(days=offset)).isoformat() for offset in range(n - 1, -1, -1)]
    buckets: dict[str, DailyStat] = {d: DailyStat(date=d) for d in days}

    for session in history:
        stat = buckets.get(session.date)
        if stat is None:
            continue
        if session.mode is TimerMode.WORK:
            stat.work_sessions += 1
            stat.work_seconds += session.duration_seconds
        else:
            stat.break_sessions += 1
            stat.break_seconds += session.duration_seconds

    return [buckets[d] for d in days]


def totals(stats: Iterable[DailyStat]) -> DailyStat:
    """Sum a window of daily stats into one entry dated at its last day."""
    total = DailyStat(date="")
    for stat in stats:
        total.date = stat.date
        total.work_sessions += stat.work_sessions
        total.break_sessions += stat.break_sessions
        total.work_seconds += stat.work_seconds
        total.break_seconds += stat.break_seconds
    return total
