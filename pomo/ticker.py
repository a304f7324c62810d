"""Blocking one-second ticker for the terminal front-end."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from pomo.engine import TimerEngine
from pomo.models import PomodoroSession, TimerState

log = logging.getLogger(__name__)

TICK_SECONDS = 1.0


class Ticker:
    """Drives :meth:`TimerEngine.tick` while the engine is running.

    Ctrl-C pauses the engine and ends :meth:`run`; the remaining time is
    kept so the caller can resume with ``engine.start()`` and run again.
    """

    def __init__(
        self,
        engine: TimerEngine,
        interval: float = TICK_SECONDS,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.engine = engine
        self.interval = interval
        self._sleep = sleep

    def run(
        self, on_tick: Optional[Callable[[TimerState], None]] = None
    ) -> Optional[PomodoroSession]:
        """Tick until the period completes or is interrupted.

        Returns the completed session, or None if the engine stopped
        running for any other reason.
        """
        sleep = self._sleep or time.sleep
        try:
            while self.engine.state.running:
                sleep(self.interval)
                session = self.engine.tick()
                if on_tick is not None:
                    on_tick(self.engine.state)
                if session is not None:
                    return session
        except KeyboardInterrupt:
            log.debug("Interrupted; pausing")
            self.engine.pause()
        return None
