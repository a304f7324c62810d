"""Tests for the daily rollup."""

from __future__ import annotations

import itertools
from datetime import date, datetime, timedelta

import pytest

from pomo.models import PomodoroSession, TimerMode
from pomo.stats import last_n_days, totals

TODAY = date(2026, 10, 18)

_ids = itertools.count(1)


def _session(day: date, mode: TimerMode = TimerMode.WORK, seconds: int = 1500) -> PomodoroSession:
    return PomodoroSession(
        id=str(next(_ids)),
        mode=mode,
        duration_seconds=seconds,
        completed_at=datetime.combine(day, datetime.min.time()),
        date=day.isoformat(),
    )


class TestLastNDays:
    def test_empty_history_gives_seven_zero_days(self) -> None:
        stats = last_n_days([], 7, TODAY)
        assert len(stats) == 7
        assert all(s.work_sessions == 0 and s.break_sessions == 0 for s in stats)

    def test_ascending_and_ends_today(self) -> None:
        stats = last_n_days([], 7, TODAY)
        assert [s.date for s in stats] == [
            "2026-10-12",
            "2026-10-13",
            "2026-10-14",
            "2026-10-15",
            "2026-10-16",
            "2026-10-17",
            "2026-10-18",
        ]

    def test_counts_by_mode(self) -> None:
        history = [
            _session(TODAY),
            _session(TODAY),
            _session(TODAY, TimerMode.BREAK, 300),
            _session(TODAY - timedelta(days=2)),
        ]
        stats = last_n_days(history, 7, TODAY)
        assert stats[-1].work_sessions == 2
        assert stats[-1].break_sessions == 1
        assert stats[-1].work_seconds == 3000
        assert stats[-3].work_sessions == 1
        assert stats[-2].total_sessions == 0

    def test_sessions_outside_window_ignored(self) -> None:
        history = [
            _session(TODAY - timedelta(days=7)),
            _session(TODAY + timedelta(days=1)),
            _session(TODAY - timedelta(days=6)),
        ]
        stats = last_n_days(history, 7, TODAY)
        assert sum(s.work_sessions for s in stats) == 1
        assert stats[0].work_sessions == 1

    def test_work_sum_matches_window(self) -> None:
        history = [
            _session(TODAY - timedelta(days=offset), mode)
            for offset in range(12)
            for mode in (TimerMode.WORK, TimerMode.BREAK)
        ]
        stats = last_n_days(history, 7, TODAY)
        window = {(TODAY - timedelta(days=i)).isoformat() for i in range(7)}
        expected = sum(1 for s in history if s.mode is TimerMode.WORK and s.date in window)
        assert sum(s.work_sessions for s in stats) == expected == 7

    def test_month_boundary(self) -> None:
        stats = last_n_days([], 3, date(2026, 3, 1))
        assert [s.date for s in stats] == ["2026-02-27", "2026-02-28", "2026-03-01"]

    def test_idempotent(self) -> None:
        history = [_session(TODAY), _session(TODAY, TimerMode.BREAK, 300)]
        assert last_n_days(history, 7, TODAY) == last_n_days(history, 7, TODAY)

    def test_does_not_mutate_history(self) -> None:
        history = [_session(TODAY)]
        before = list(history)
        last_n_days(history, 7, TODAY)
        assert history == before

    def test_custom_length(self) -> None:
        assert len(last_n_days([], 30, TODAY)) == 30

    def test_defaults_to_today(self) -> None:
        stats = last_n_days([])
        assert stats[-1].date == date.today().isoformat()

    def test_rejects_non_positive_n(self) -> None:
        with pytest.raises(ValueError):
            last_n_days([], 0, TODAY)


class TestTotals:
    def test_sums_window(self) -> None:
        history = [_session(TODAY), _session(TODAY - timedelta(days=1)),
                   _session(TODAY, TimerMode.BREAK, 300)]
        total = totals(last_n_days(history, 7, TODAY))
        assert total.work_sessions == 2
        assert total.break_sessions == 1
        assert total.work_minutes == 50
        assert total.date == TODAY.isoformat()
