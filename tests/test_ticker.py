"""Tests for the blocking ticker."""

from __future__ import annotations

from unittest.mock import patch

from pomo.engine import TimerEngine
from pomo.models import TimerMode, TimerSettings
from pomo.notifications import NotificationCoordinator, NullNotificationService
from pomo.recorder import SessionRecorder
from pomo.stores import MemorySessionStore
from pomo.ticker import Ticker


def _engine(work: int = 1, brk: int = 1) -> TimerEngine:
    return TimerEngine(
        SessionRecorder(MemorySessionStore()),
        NotificationCoordinator(NullNotificationService()),
        settings=TimerSettings(work_duration=work, break_duration=brk),
    )


class TestTickerRun:
    @patch("pomo.ticker.time.sleep")
    def test_completes(self, mock_sleep) -> None:
        """A one-minute period sleeps 60 times and returns the session."""
        engine = _engine()
        engine.start()
        session = Ticker(engine).run()
        assert session is not None
        assert session.mode == TimerMode.WORK
        assert mock_sleep.call_count == 60
        assert engine.state.mode == TimerMode.BREAK
        assert not engine.state.running

    @patch("pomo.ticker.time.sleep", side_effect=KeyboardInterrupt)
    def test_interrupted_pauses(self, mock_sleep) -> None:
        """Ctrl-C pauses and keeps the remaining time."""
        engine = _engine()
        engine.start()
        assert Ticker(engine).run() is None
        assert not engine.state.running
        assert engine.state.remaining_seconds == 60
        assert len(engine.recorder) == 0

    def test_idle_engine_returns_at_once(self) -> None:
        calls = []
        engine = _engine()
        assert Ticker(engine, sleep=calls.append).run() is None
        assert calls == []

    def test_on_tick_called_each_second(self) -> None:
        engine = _engine()
        engine.start()
        seen = []
        Ticker(engine, sleep=lambda s: None).run(on_tick=seen.append)
        assert len(seen) == 60
        assert seen[0].remaining_seconds == 59
        assert seen[-1].mode == TimerMode.BREAK

    def test_resume_after_interrupt(self) -> None:
        engine = _engine()
        engine.start()
        count = 0

        def sleep(seconds: float) -> None:
            nonlocal count
            count += 1
            if count == 11:
                raise KeyboardInterrupt

        ticker = Ticker(engine, sleep=sleep)
        assert ticker.run() is None
        assert engine.state.remaining_seconds == 50

        engine.start()
        session = ticker.run()
        assert session is not None
        assert session.duration_seconds == 60
        assert len(engine.recorder) == 1

    def test_interval_passed_to_sleep(self) -> None:
        engine = _engine()
        engine.start()
        intervals = set()
        Ticker(engine, interval=0.5, sleep=intervals.add).run()
        assert intervals == {0.5}
