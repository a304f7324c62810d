"""Tests for the asyncio timer actor."""

from __future__ import annotations

import asyncio

import pytest

from pomo.actor import TimerActor
from pomo.engine import TimerEngine
from pomo.models import TimerMode, TimerSettings
from pomo.notifications import NotificationCoordinator, NullNotificationService
from pomo.recorder import SessionRecorder
from pomo.stores import MemorySessionStore

FAST = 0.0005


def _actor(work: int = 1, brk: int = 1, interval: float = FAST) -> TimerActor:
    engine = TimerEngine(
        SessionRecorder(MemorySessionStore()),
        NotificationCoordinator(NullNotificationService()),
        settings=TimerSettings(work_duration=work, break_duration=brk),
    )
    return TimerActor(engine, interval=interval)


async def _with_actor(actor: TimerActor, body):
    loop_task = asyncio.create_task(actor.run())
    try:
        return await body(actor)
    finally:
        await actor.stop()
        await loop_task


class TestTimerActor:
    def test_runs_period_to_completion(self) -> None:
        async def body(actor: TimerActor):
            assert await actor.start() is True
            return await asyncio.wait_for(actor.completions.get(), timeout=5)

        actor = _actor()
        session = asyncio.run(_with_actor(actor, body))
        assert session.mode == TimerMode.WORK
        assert session.duration_seconds == 60
        assert actor.state.mode == TimerMode.BREAK
        assert actor.state.running is False
        assert len(actor.engine.recorder) == 1

    def test_does_not_auto_start_next_period(self) -> None:
        async def body(actor: TimerActor):
            await actor.start()
            await asyncio.wait_for(actor.completions.get(), timeout=5)
            await asyncio.sleep(FAST * 50)
            return actor.state

        state = asyncio.run(_with_actor(_actor(), body))
        assert state.remaining_seconds == 60
        assert state.running is False

    def test_pause_stops_ticking(self) -> None:
        async def body(actor: TimerActor):
            await actor.start()
            await asyncio.sleep(FAST * 20)
            await actor.pause()
            paused_at = actor.state.remaining_seconds
            await asyncio.sleep(FAST * 50)
            return paused_at, actor.state

        paused_at, state = asyncio.run(_with_actor(_actor(work=5), body))
        assert state.running is False
        assert state.remaining_seconds == paused_at
        assert paused_at < 300

    def test_reset_restores_full_period(self) -> None:
        async def body(actor: TimerActor):
            await actor.start()
            await asyncio.sleep(FAST * 20)
            await actor.reset()
            await asyncio.sleep(FAST * 20)
            return actor.state

        state = asyncio.run(_with_actor(_actor(work=5), body))
        assert state.remaining_seconds == 300
        assert state.running is False

    def test_switch_mode_and_settings(self) -> None:
        async def body(actor: TimerActor):
            assert await actor.switch_mode(TimerMode.BREAK) is True
            settings = await actor.apply_settings(
                TimerSettings(work_duration=10, break_duration=3)
            )
            return settings, actor.state

        settings, state = asyncio.run(_with_actor(_actor(), body))
        assert settings.break_duration == 3
        assert state.mode == TimerMode.BREAK
        assert state.remaining_seconds == 180

    def test_switch_refused_while_running(self) -> None:
        async def body(actor: TimerActor):
            await actor.start()
            refused = await actor.switch_mode(TimerMode.BREAK)
            await actor.pause()
            return refused

        assert asyncio.run(_with_actor(_actor(work=5), body)) is False

    def test_bad_command_argument_reaches_caller(self) -> None:
        async def body(actor: TimerActor):
            with pytest.raises(ValueError):
                await actor.switch_mode("lunch")  # type: ignore[arg-type]
            return actor.state

        state = asyncio.run(_with_actor(_actor(), body))
        assert state.mode == TimerMode.WORK
