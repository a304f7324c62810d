"""Completion alerts and user feedback cues.

The :class:`NotificationCoordinator` keeps at most one alert pending: the
one for the period that is currently running. Anything that stops the
countdown must call :meth:`NotificationCoordinator.cancel_all` so a paused
or reset period never announces itself later.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable, Optional, Protocol

log = logging.getLogger(__name__)

AlertHandler = Callable[[str, str], None]


class NotificationService(Protocol):
    def schedule(self, title: str, body: str, delay_seconds: float) -> str: ...

    def cancel_all(self) -> None: ...


class FeedbackService(Protocol):
    def cue(self, kind: str) -> None: ...


class NotificationCoordinator:
    """Schedules and cancels the single pending completion alert."""

    def __init__(self, service: NotificationService) -> None:
        self._service = service
        self._pending: Optional[str] = None

    @property
    def pending(self) -> Optional[str]:
        """Handle of the alert waiting to fire, if any."""
        return self._pending

    def schedule(self, title: str, body: str, delay_seconds: float) -> Optional[str]:
        """Schedule the alert for the running period, replacing any earlier one.

        Returns the service handle, or ``None`` when the service refused.
        """
        if self._pending is not None:
            self.cancel_all()
        try:
            handle = self._service.schedule(title, body, delay_seconds)
        except Exception:
            log.warning("Could not schedule alert %r", title, exc_info=True)
            return None
        self._pending = handle
        log.debug("Alert %s scheduled in %ss", handle, delay_seconds)
        return handle

    def notify_now(self, title: str, body: str) -> Optional[str]:
        """Fire an alert immediately. The pending alert is dropped first."""
        self.cancel_all()
        try:
            return self._service.schedule(title, body, 0)
        except Exception:
            log.warning("Could not deliver alert %r", title, exc_info=True)
            return None

    def cancel_all(self) -> None:
        """Cancel whatever is pending."""
        self._pending = None
        try:
            self._service.cancel_all()
        except Exception:
            log.warning("Could not cancel pending alerts", exc_info=True)


class LocalNotificationService:
    """In-process alerts built on :class:`threading.Timer`.

    *on_fire* is called with the title and body when an alert is due. A
    zero delay fires on the calling thread before ``schedule`` returns.
    """

    def __init__(self, on_fire: AlertHandler) -> None:
        self._on_fire = on_fire
        self._timers: dict[str, threading.Timer] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    def schedule(self, title: str, body: str, delay_seconds: float) -> str:
        handle = f"alert-{next(self._ids)}"
        if delay_seconds <= 0:
            self._on_fire(title, body)
            return handle
        timer = threading.Timer(delay_seconds, self._fire, args=(handle, title, body))
        timer.daemon = True
        with self._lock:
            self._timers[handle] = timer
        timer.start()
        return handle

    def _fire(self, handle: str, title: str, body: str) -> None:
        with self._lock:
            if self._timers.pop(handle, None) is None:
                return
        self._on_fire(title, body)

    def cancel_all(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    @property
    def outstanding(self) -> int:
        with self._lock:
            return len(self._timers)


class NullNotificationService:
    """Accepts alerts and drops them (notifications turned off)."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)

    def schedule(self, title: str, body: str, delay_seconds: float) -> str:
        return f"null-{next(self._ids)}"

    def cancel_all(self) -> None:
        pass


class NullFeedback:
    def cue(self, kind: str) -> None:
        pass
