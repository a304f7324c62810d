"""Exceptions raised by storage and notification collaborators."""

from __future__ import annotations


class PomoError(Exception):
    """Base class for all pomo errors."""


class PersistenceError(PomoError):
    """Reading from or writing to a settings or session store failed."""


class NotificationError(PomoError):
    """An alert could not be scheduled or cancelled."""
