"""Pydantic models, the single source of truth for all data types."""

from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_DURATION_MINUTES = 1
DEFAULT_WORK_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5


class TimerMode(str, enum.Enum):
    """The two kinds of period the timer alternates between."""

    WORK = "work"
    BREAK = "break"

    def toggled(self) -> TimerMode:
        return TimerMode.BREAK if self is TimerMode.WORK else TimerMode.WORK

    @property
    def label(self) -> str:
        return self.value.capitalize()


def _clamp_minutes(value: Any) -> int:
    """Coerce user input to a whole number of minutes, never below the minimum."""
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        return MIN_DURATION_MINUTES
    return max(MIN_DURATION_MINUTES, minutes)


class TimerSettings(BaseModel):
    """Work and break lengths, in minutes."""

    work_duration: int = DEFAULT_WORK_MINUTES
    break_duration: int = DEFAULT_BREAK_MINUTES

    @field_validator("work_duration", "break_duration", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> int:
        return _clamp_minutes(value)

    def minutes_for(self, mode: TimerMode) -> int:
        return self.work_duration if mode is TimerMode.WORK else self.break_duration

    def seconds_for(self, mode: TimerMode) -> int:
        return self.minutes_for(mode) * 60


class TimerState(BaseModel):
    """Read-only snapshot of the timer."""

    model_config = ConfigDict(frozen=True)

    mode: TimerMode = TimerMode.WORK
    remaining_seconds: int = Field(ge=0)
    running: bool = False


def day_key(moment: datetime | date) -> str:
    """Return the local calendar-day key (``YYYY-MM-DD``) for a moment."""
    if isinstance(moment, datetime):
        moment = moment.date()
    return moment.isoformat()


class PomodoroSession(BaseModel):
    """A completed work or break period."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    mode: TimerMode
    duration_seconds: int = Field(gt=0)
    completed_at: datetime
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")

    @property
    def day(self) -> date:
        return date.fromisoformat(self.date)

    @property
    def duration_minutes(self) -> int:
        return round(self.duration_seconds / 60)


class DailyStat(BaseModel):
    """Sessions completed on one calendar day, split by mode."""

    date: str
    work_sessions: int = Field(default=0, ge=0)
    break_sessions: int = Field(default=0, ge=0)
    work_seconds: int = Field(default=0, ge=0)
    break_seconds: int = Field(default=0, ge=0)

    @property
    def day(self) -> date:
        return date.fromisoformat(self.date)

    @property
    def work_minutes(self) -> int:
        return self.work_seconds // 60

    @property
    def break_minutes(self) -> int:
        return self.break_seconds // 60

    @property
    def total_sessions(self) -> int:
        return self.work_sessions + self.break_sessions


class AppConfig(BaseModel):
    """Application configuration (persisted to ~/.config/pomo/config.json)."""

    data_dir: Optional[str] = None  # None = use default (~/.local/share/pomo/)
    notifications: bool = True
    sound: bool = True
