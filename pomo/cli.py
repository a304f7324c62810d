"""Pomo CLI -- a Pomodoro focus timer for the terminal."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from pomo import charts, display, encouragement, stats
from pomo import config as cfg
from pomo.db import SqliteSessionStore
from pomo.engine import ALERT_TITLE, TimerEngine, completion_message
from pomo.models import AppConfig, PomodoroSession, TimerMode, TimerSettings
from pomo.notifications import (
    LocalNotificationService,
    NotificationCoordinator,
    NotificationService,
    NullNotificationService,
)
from pomo.recorder import SessionRecorder
from pomo.stores import JsonSettingsStore
from pomo.ticker import Ticker

log = logging.getLogger(__name__)

app = typer.Typer(
    name="pomo",
    help="A Pomodoro focus timer: work, break, repeat.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """A Pomodoro focus timer: work, break, repeat."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _on_alert(title: str, body: str) -> None:
    # The bell comes from ConsoleFeedback and the panel from ``run``.
    log.info("%s: %s", title, body)


def _notification_service(config: AppConfig) -> NotificationService:
    if not config.notifications:
        return NullNotificationService()
    return LocalNotificationService(_on_alert)


def _recorder() -> SessionRecorder:
    """Session recorder over the configured database, history loaded."""
    recorder = SessionRecorder(SqliteSessionStore())
    recorder.load()
    return recorder


def _engine(feedback: bool = False) -> TimerEngine:
    """Build an engine wired to the configured stores."""
    config = cfg.load_config()
    return TimerEngine.from_stores(
        JsonSettingsStore(cfg.get_settings_path()),
        _recorder(),
        NotificationCoordinator(_notification_service(config)),
        feedback=display.ConsoleFeedback(bell=config.sound) if feedback else None,
    )


def _merged_settings(
    current: TimerSettings, work: Optional[int], break_: Optional[int]
) -> TimerSettings:
    """Current settings with any durations given on the command line."""
    return TimerSettings(
        work_duration=work if work is not None else current.work_duration,
        break_duration=break_ if break_ is not None else current.break_duration,
    )


def _run_period(engine: TimerEngine) -> Optional[PomodoroSession]:
    """Tick the running engine with a progress bar until completion or Ctrl-C."""
    mode = engine.state.mode
    total = engine.period_seconds
    progress = display.create_timer_progress()

    with progress:
        task = progress.add_task(
            mode.label,
            total=total,
            completed=total - engine.state.remaining_seconds,
            clock=display.format_clock(engine.state.remaining_seconds),
        )

        def on_tick(state) -> None:
            if state.mode is mode:
                progress.update(
                    task,
                    completed=total - state.remaining_seconds,
                    clock=display.format_clock(state.remaining_seconds),
                )

        session = Ticker(engine).run(on_tick=on_tick)
        if session is not None:
            progress.update(task, completed=total, clock=display.format_clock(0))
    return session


# ---------------------------------------------------------------------------
# Timer
# ---------------------------------------------------------------------------


@app.command()
def run(
    mode: TimerMode = typer.Option(TimerMode.WORK, "--mode", "-m", help="Period to start with"),
    work: Optional[int] = typer.Option(None, "--work", "-w", help="Set and save the work duration"),
    break_: Optional[int] = typer.Option(None, "--break", "-b", help="Set and save the break duration"),
) -> None:
    """Start the timer. Ctrl-C pauses."""
    engine = _engine(feedback=True)
    if work is not None or break_ is not None:
        engine.apply_settings(_merged_settings(engine.settings, work, break_))
    engine.switch_mode(mode)

    while True:
        state = engine.state
        display.print_info(
            f"{state.mode.label}: {display.format_clock(state.remaining_seconds)}"
        )
        engine.start()
        session = _run_period(engine)

        if session is None:
            display.print_state(engine.state)
            done = display.progress_fraction(engine.state, engine.period_seconds)
            display.print_info(f"{done:.0%} of this period done.")
            choice = typer.prompt(
                "[r]esume, re[s]et or [q]uit", default="r", show_default=True
            ).strip().lower()
            if choice.startswith("r"):
                continue
            engine.reset()
            if choice.startswith("s"):
                continue
            break

        display.print_alert(ALERT_TITLE, completion_message(session.mode), bell=False)
        if session.mode is TimerMode.WORK:
            display.print_nudge(encouragement.get_break_message())
        else:
            display.print_nudge(encouragement.get_nudge())

        next_mode = engine.state.mode
        if not typer.confirm(f"Start {next_mode.value} now?", default=True):
            break

    display.print_info(f"Sessions recorded: {len(engine.recorder)}")


# ---------------------------------------------------------------------------
# Settings, history and stats
# ---------------------------------------------------------------------------


@app.command()
def settings(
    work: Optional[int] = typer.Option(None, "--work", "-w", help="Work duration in minutes"),
    break_: Optional[int] = typer.Option(None, "--break", "-b", help="Break duration in minutes"),
    show: bool = typer.Option(False, "--show", help="Show current settings"),
) -> None:
    """View or change the work and break durations."""
    engine = _engine()
    if work is None and break_ is None:
        display.print_settings(engine.settings)
        return

    updated = engine.apply_settings(_merged_settings(engine.settings, work, break_))
    display.print_success(
        f"Work {updated.work_duration} min, break {updated.break_duration} min."
    )
    if show:
        display.print_settings(updated)


@app.command()
def history(
    limit: int = typer.Option(5, "--limit", "-n", help="Number of sessions to show"),
) -> None:
    """Show the most recent sessions."""
    recorder = _recorder()
    display.print_sessions(recorder.recent(limit))


@app.command(name="stats")
def show_stats(
    days: int = typer.Option(7, "--days", "-d", min=1, max=366, help="Days to include"),
    chart: Optional[Path] = typer.Option(None, "--chart", help="Write a PNG chart to this path"),
    breaks: bool = typer.Option(False, "--breaks", help="Include break sessions in the chart"),
) -> None:
    """Sessions per day over the last few days."""
    recorder = _recorder()
    daily = stats.last_n_days(recorder.list_all(), days, date.today())
    display.print_stats(daily, title=f"Last {days} Days")

    total = stats.totals(daily)
    display.print_info(
        f"{total.work_sessions} work sessions, {total.work_minutes} min focused."
    )

    if chart is not None:
        image = charts.sessions_chart(daily, title=f"Last {days} Days", show_breaks=breaks)
        path = charts.save_chart(image, chart)
        display.print_success(f"Chart written to {path}")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@app.command()
def config(
    data_dir: Optional[str] = typer.Option(
        None, "--data-dir", help="Store session history in this directory"
    ),
    notify: Optional[bool] = typer.Option(
        None, "--notify/--no-notify", help="Turn completion alerts on or off"
    ),
    sound: Optional[bool] = typer.Option(
        None, "--sound/--no-sound", help="Ring the terminal bell when a period ends"
    ),
    reset: bool = typer.Option(False, "--reset", help="Reset to the default data directory"),
    show: bool = typer.Option(False, "--show", help="Show current config"),
) -> None:
    """Configure where data is stored and how alerts behave."""
    if data_dir:
        result = cfg.set_data_dir(data_dir)
        display.print_success(f"Session data will be stored in: {result.data_dir}")
    elif reset:
        cfg.reset_data_dir()
        display.print_success("Reset to default data directory.")
    elif notify is not None or sound is not None:
        current = cfg.load_config()
        if notify is not None:
            current.notifications = notify
        if sound is not None:
            current.sound = sound
        cfg.save_config(current)
        display.print_success(
            f"Alerts {'on' if current.notifications else 'off'}, "
            f"sound {'on' if current.sound else 'off'}."
        )
    elif show:
        current = cfg.load_config()
        display.print_info(f"Database: {cfg.get_db_path()}")
        display.print_info(f"Settings: {cfg.get_settings_path()}")
        display.print_info(f"Alerts: {'on' if current.notifications else 'off'}")
        display.print_info(f"Sound: {'on' if current.sound else 'off'}")
    else:
        display.print_info("Use --data-dir, --notify/--no-notify, --sound/--no-sound, --reset, or --show.")
