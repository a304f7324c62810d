"""Pomodoro state machine: work and break periods counted down one tick at a time.

The engine holds ``(mode, remaining_seconds, running)`` and nothing else
mutable. It never reads the wall clock to find out how much time is left;
the decremented counter is the only source of truth, so a tick that never
arrives (a suspended laptop, a stalled loop) simply pauses the countdown.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from pomo.errors import PersistenceError
from pomo.models import PomodoroSession, TimerMode, TimerSettings, TimerState, day_key
from pomo.notifications import FeedbackService, NotificationCoordinator, NullFeedback
from pomo.recorder import SessionRecorder, new_session_id
from pomo.stores import SettingsStore

log = logging.getLogger(__name__)

ALERT_TITLE = "Pomodoro Timer"

# Scheduled when a period starts, delivered at its deadline.
_DEADLINE_BODY: dict[TimerMode, str] = {
    TimerMode.WORK: "Work session complete!",
    TimerMode.BREAK: "Break is over!",
}

# Delivered when the countdown actually reaches zero.
_COMPLETION_BODY: dict[TimerMode, str] = {
    TimerMode.WORK: "Work session complete! Time for a break.",
    TimerMode.BREAK: "Break is over! Ready to work?",
}

StateListener = Callable[[TimerState], None]


def completion_message(mode: TimerMode) -> str:
    """Alert text for the end of a period of *mode*."""
    return _COMPLETION_BODY[mode]


class TimerEngine:
    """Owns one timer and reacts to ticks and user commands.

    All methods must be called from a single thread (or a single asyncio
    task); see :class:`pomo.ticker.Ticker` and :class:`pomo.actor.TimerActor`.
    """

    def __init__(
        self,
        recorder: SessionRecorder,
        coordinator: NotificationCoordinator,
        settings: Optional[TimerSettings] = None,
        settings_store: Optional[SettingsStore] = None,
        feedback: Optional[FeedbackService] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._recorder = recorder
        self._coordinator = coordinator
        self._settings_store = settings_store
        self._feedback = feedback or NullFeedback()
        self._clock = clock
        self._settings = settings or TimerSettings()
        self._listeners: list[StateListener] = []

        self._mode = TimerMode.WORK
        self._period_seconds = self._settings.seconds_for(self._mode)
        self._remaining = self._period_seconds
        self._running = False

    @classmethod
    def from_stores(
        cls,
        settings_store: SettingsStore,
        recorder: SessionRecorder,
        coordinator: NotificationCoordinator,
        **kwargs,
    ) -> TimerEngine:
        """Build an engine with settings loaded from *settings_store*.

        Unreadable settings fall back to the defaults.
        """
        try:
            settings = settings_store.load()
        except PersistenceError:
            log.warning("Settings unavailable; using defaults", exc_info=True)
            settings = TimerSettings()
        return cls(
            recorder,
            coordinator,
            settings=settings,
            settings_store=settings_store,
            **kwargs,
        )

    # -- Observation ---------------------------------------------------------

    @property
    def state(self) -> TimerState:
        return TimerState(
            mode=self._mode, remaining_seconds=self._remaining, running=self._running
        )

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    @property
    def period_seconds(self) -> int:
        """Full length of the current period."""
        return self._period_seconds

    @property
    def recorder(self) -> SessionRecorder:
        return self._recorder

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call *listener* with the new state after every change.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                log.exception("State listener %r failed", listener)

    # -- Commands ------------------------------------------------------------

    def start(self) -> bool:
        """Start or resume the countdown. Returns False if already running."""
        if self._running:
            log.debug("start() ignored: already running")
            return False
        self._running = True
        self._coordinator.schedule(
            ALERT_TITLE, _DEADLINE_BODY[self._mode], self._remaining
        )
        self._feedback.cue("start")
        log.debug("Started %s with %ss left", self._mode.value, self._remaining)
        self._publish()
        return True

    def pause(self) -> bool:
        """Stop the countdown, keeping the remaining time. False if not running."""
        if not self._running:
            log.debug("pause() ignored: not running")
            return False
        self._running = False
        self._coordinator.cancel_all()
        self._feedback.cue("pause")
        log.debug("Paused %s with %ss left", self._mode.value, self._remaining)
        self._publish()
        return True

    def reset(self) -> None:
        """Stop and refill the current period from the current settings."""
        self._running = False
        self._coordinator.cancel_all()
        self._fill(self._mode)
        self._feedback.cue("reset")
        log.debug("Reset %s to %ss", self._mode.value, self._remaining)
        self._publish()

    def switch_mode(self, target: TimerMode) -> bool:
        """Change to *target* with a full period. Refused while running."""
        if self._running:
            log.debug("switch_mode(%s) ignored: running", target.value)
            return False
        self._fill(TimerMode(target))
        self._publish()
        return True

    def apply_settings(self, settings: TimerSettings) -> TimerSettings:
        """Adopt new durations and save them.

        While idle the current period is refilled at once; a running
        countdown keeps going and the change shows on the next period.
        """
        self._settings = TimerSettings.model_validate(settings.model_dump())
        if self._settings_store is not None:
            try:
                self._settings_store.save(self._settings)
            except PersistenceError:
                log.warning("Settings not saved; keeping them in memory", exc_info=True)
        if not self._running:
            self._fill(self._mode)
        self._publish()
        return self._settings

    def tick(self) -> Optional[PomodoroSession]:
        """Count down one second.

        Returns the recorded session when this tick completed the period.
        """
        if not self._running:
            return None
        self._remaining = max(0, self._remaining - 1)
        if self._remaining > 0:
            self._publish()
            return None
        return self._complete()

    # -- Internals -----------------------------------------------------------

    def _fill(self, mode: TimerMode) -> None:
        self._mode = mode
        self._period_seconds = self._settings.seconds_for(mode)
        self._remaining = self._period_seconds

    def _complete(self) -> PomodoroSession:
        finished = self._mode
        self._running = False

        now = self._clock()
        session = PomodoroSession(
            id=new_session_id(),
            mode=finished,
            duration_seconds=self._period_seconds,
            completed_at=now,
            date=day_key(now),
        )
        try:
            self._recorder.record(session)
        except PersistenceError:
            log.warning("Session %s kept in memory only", session.id, exc_info=True)

        self._coordinator.notify_now(ALERT_TITLE, _COMPLETION_BODY[finished])
        self._feedback.cue("complete")

        self._fill(finished.toggled())
        log.info("%s period complete; next up: %s", finished.label, self._mode.value)
        self._publish()
        return session
