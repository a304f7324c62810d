"""Rich terminal formatting helpers."""

from __future__ import annotations

from datetime import date

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table
from rich.text import Text

from pomo.models import DailyStat, PomodoroSession, TimerMode, TimerSettings, TimerState

console = Console()

_MODE_STYLE: dict[TimerMode, str] = {
    TimerMode.WORK: "bold magenta",
    TimerMode.BREAK: "bold cyan",
}

_MODE_HEADING: dict[TimerMode, str] = {
    TimerMode.WORK: "Focus Time",
    TimerMode.BREAK: "Break Time",
}

_CUE_TEXT: dict[str, str] = {
    "start": "started",
    "pause": "paused",
    "reset": "reset",
}


def format_clock(seconds: int) -> str:
    """Format a countdown as ``MM:SS``."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def format_day(day_key: str) -> str:
    """Format a ``YYYY-MM-DD`` key as e.g. ``Oct 18``."""
    day = date.fromisoformat(day_key)
    return f"{day:%b} {day.day}"


def progress_fraction(state: TimerState, period_seconds: int) -> float:
    """Share of a *period_seconds* period already elapsed, in ``[0, 1]``."""
    if period_seconds <= 0:
        return 1.0
    return min(1.0, max(0.0, 1 - state.remaining_seconds / period_seconds))


def print_state(state: TimerState) -> None:
    """Print the current mode and time left."""
    status = "running" if state.running else "idle"
    text = Text(justify="center")
    text.append(f"{format_clock(state.remaining_seconds)}\n", style="bold")
    text.append(f"{_MODE_HEADING[state.mode]} ({status})", style=_MODE_STYLE[state.mode])
    console.print(Panel(text, border_style="blue", padding=(1, 4)))


def print_settings(settings: TimerSettings) -> None:
    console.print(
        Panel(
            f"Work: {settings.work_duration} min\nBreak: {settings.break_duration} min",
            title="Settings",
            border_style="blue",
        )
    )


def print_sessions(sessions: list[PomodoroSession], title: str = "Recent Sessions") -> None:
    """Print sessions in the order given."""
    if not sessions:
        console.print(Panel("No sessions yet.", title=title, border_style="dim"))
        return

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("mode", width=6)
    table.add_column("day", width=8)
    table.add_column("time", width=6)
    table.add_column("duration", justify="right")

    for session in sessions:
        table.add_row(
            session.mode.label,
            format_day(session.date),
            session.completed_at.strftime("%H:%M"),
            f"{session.duration_minutes} min",
            style=_MODE_STYLE[session.mode],
        )

    console.print(Panel(table, title=title, border_style="blue"))


def print_stats(stats: list[DailyStat], title: str = "Last 7 Days") -> None:
    """Print one row per day with work/break counts."""
    table = Table(box=None, pad_edge=False)
    table.add_column("Day")
    table.add_column("Work", justify="right")
    table.add_column("Break", justify="right")
    table.add_column("Focus", justify="right")

    for stat in stats:
        style = "dim" if stat.total_sessions == 0 else ""
        table.add_row(
            format_day(stat.date),
            str(stat.work_sessions),
            str(stat.break_sessions),
            f"{stat.work_minutes} min",
            style=style,
        )

    console.print(Panel(table, title=title, border_style="green"))


def print_alert(title: str, body: str, bell: bool = True) -> None:
    """Show a completion alert, ringing the terminal bell if asked."""
    if bell:
        console.bell()
    console.print(Panel(Text(body, justify="center"), title=title, border_style="magenta"))


def print_nudge(message: str) -> None:
    """Print an encouragement message in a styled panel."""
    text = Text(message, justify="center")
    console.print(Panel(text, border_style="magenta", padding=(1, 4)))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]{message}[/blue]")


class BellFeedback:
    """Rings the terminal bell when a period completes; silent otherwise."""

    def cue(self, kind: str) -> None:
        if kind == "complete":
            console.bell()


class ConsoleFeedback(BellFeedback):
    """Short dim status line for start/pause/reset, plus the completion bell."""

    def __init__(self, bell: bool = True) -> None:
        self.bell = bell

    def cue(self, kind: str) -> None:
        text = _CUE_TEXT.get(kind)
        if text:
            console.print(f"[dim]Timer {text}.[/dim]")
        elif self.bell:
            super().cue(kind)


def create_timer_progress() -> Progress:
    """Create a Rich progress bar for the countdown."""
    return Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TextColumn("{task.fields[clock]}"),
        console=console,
    )
