"""Asyncio actor that serialises ticks and commands for one engine.

Every mutation goes through one inbox and is applied by one task, so a
tick can never interleave with ``start``/``pause``/``reset``. Ticks carry
the generation of the ticker that produced them; ticks queued before a
pause are dropped instead of shortening the resumed period.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from pomo.engine import TimerEngine
from pomo.models import PomodoroSession, TimerMode, TimerSettings, TimerState

log = logging.getLogger(__name__)

_COMMANDS = frozenset({"start", "pause", "reset", "switch_mode", "apply_settings"})


@dataclass
class _Message:
    command: str
    args: tuple[Any, ...] = ()
    generation: int = 0
    reply: Optional[asyncio.Future] = field(default=None, repr=False)


class TimerActor:
    """Owns a :class:`TimerEngine` inside a running event loop."""

    def __init__(self, engine: TimerEngine, interval: float = 1.0) -> None:
        self.engine = engine
        self.interval = interval
        self.completions: asyncio.Queue[PomodoroSession] = asyncio.Queue()
        self._inbox: asyncio.Queue[_Message] = asyncio.Queue()
        self._generation = 0
        self._ticker: Optional[asyncio.Task] = None

    @property
    def state(self) -> TimerState:
        return self.engine.state

    # -- Public commands -----------------------------------------------------

    async def start(self) -> bool:
        return await self._call("start")

    async def pause(self) -> bool:
        return await self._call("pause")

    async def reset(self) -> None:
        await self._call("reset")

    async def switch_mode(self, target: TimerMode) -> bool:
        return await self._call("switch_mode", target)

    async def apply_settings(self, settings: TimerSettings) -> TimerSettings:
        return await self._call("apply_settings", settings)

    async def stop(self) -> None:
        """Ask :meth:`run` to finish after the messages already queued."""
        await self._call("stop")

    # -- Loop ----------------------------------------------------------------

    async def run(self) -> None:
        """Process messages until :meth:`stop` is called."""
        try:
            while True:
                msg = await self._inbox.get()
                if msg.command == "stop":
                    self._resolve(msg, None)
                    break
                try:
                    result = self._handle(msg)
                except Exception as exc:
                    if msg.reply is None:
                        log.exception("Tick handling failed")
                    elif not msg.reply.done():
                        msg.reply.set_exception(exc)
                    continue
                self._sync_ticker()
                self._resolve(msg, result)
        finally:
            self._stop_ticker()

    async def _call(self, command: str, *args: Any) -> Any:
        reply = asyncio.get_running_loop().create_future()
        await self._inbox.put(_Message(command, args, reply=reply))
        return await reply

    @staticmethod
    def _resolve(msg: _Message, result: Any) -> None:
        if msg.reply is not None and not msg.reply.done():
            msg.reply.set_result(result)

    def _handle(self, msg: _Message) -> Any:
        if msg.command == "tick":
            if msg.generation != self._generation:
                return None
            session = self.engine.tick()
            if session is not None:
                self.completions.put_nowait(session)
            return session
        if msg.command not in _COMMANDS:
            raise ValueError(f"Unknown command: {msg.command}")
        return getattr(self.engine, msg.command)(*msg.args)

    def _sync_ticker(self) -> None:
        running = self.engine.state.running
        if running and self._ticker is None:
            self._generation += 1
            self._ticker = asyncio.create_task(self._tick_loop(self._generation))
        elif not running and self._ticker is not None:
            self._stop_ticker()

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
        self._generation += 1

    async def _tick_loop(self, generation: int) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self._inbox.put(_Message("tick", generation=generation))
