"""Command-line interface for the editor time tracker."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from pydantic import ValidationError

from .binder import LifecycleBinder, run_session
from .config import AFK_THRESHOLD_MAX, AFK_THRESHOLD_MIN, PreferencesStore, TrackerPreferences
from .event_logger import EventLogger
from .events import TimeTrackerEvent
from .formatting import preview_values
from .host import EditorHost, HookDispatcher, ProcessHost
from .paths import get_preferences_path
from .providers import build_default_registry
from .tracker import ActivityTracker

logger = logging.getLogger(__name__)

app = typer.Typer(help="Log editor activity to a plain text file.")
config_app = typer.Typer(help="Inspect and change tracker preferences.")
app.add_typer(config_app, name="config")


@app.callback(no_args_is_help=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
    preferences_path: Optional[Path] = typer.Option(
        None,
        "--preferences",
        path_type=Path,
        help="Location of the preferences file.",
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    ctx.obj = TrackerPreferences(PreferencesStore(preferences_path or get_preferences_path()))


def _event_logger(preferences: TrackerPreferences, host: EditorHost) -> EventLogger:
    registry = build_default_registry(host).freeze()
    return EventLogger(preferences, registry)


@contextmanager
def _saving_preferences(preferences: TrackerPreferences) -> Iterator[None]:
    try:
        yield
    except OSError as exc:
        typer.echo(f"Could not save preferences to {preferences.store.path}: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def preview(
    ctx: typer.Context,
    event: TimeTrackerEvent = typer.Option(
        TimeTrackerEvent.EDITOR_FOCUS,
        "--event",
        help="Event used to render the sample line.",
    ),
    project: Optional[str] = typer.Option(
        None, "--project", help="Project name reported by %project%."
    ),
) -> None:
    """Show how the current log line template renders."""
    preferences: TrackerPreferences = ctx.obj
    host = ProcessHost(product_name=project)
    event_logger = _event_logger(preferences, host)

    typer.echo(f"Log file:  {preferences.log_file_path}")
    typer.echo(f"Log line:  {preferences.log_line}")
    typer.echo(f"Preview:   {event_logger.format_event(event)}")
    typer.echo()
    typer.echo("Template arguments:")
    for token, value in preview_values(event_logger.providers, event):
        typer.echo(f"  {token:<20} {value}")
    typer.echo()
    typer.echo("Old logs won't change when changing these settings.")


@app.command()
def run(
    ctx: typer.Context,
    interval: float = typer.Option(
        1.0,
        "--interval",
        min=0.0,
        help="Seconds between state checks.",
    ),
    project: Optional[str] = typer.Option(
        None, "--project", help="Project name reported by %project%."
    ),
    ticks: Optional[int] = typer.Option(
        None,
        "--ticks",
        min=1,
        help="Stop after this many state checks instead of running until interrupted.",
    ),
) -> None:
    """Track a session from this process until interrupted.

    Without an editor attached no user input is observed, so the session
    reports user-afk once the AFK threshold has passed.
    """
    preferences: TrackerPreferences = ctx.obj
    host = ProcessHost(product_name=project)
    event_logger = _event_logger(preferences, host)
    tracker = ActivityTracker(host, event_logger.log_event, preferences)
    dispatcher = HookDispatcher()
    LifecycleBinder(tracker).subscribe(dispatcher)

    logger.info("Logging events to %s", preferences.log_file_path)
    run_session(dispatcher, interval=interval, max_ticks=ticks)


@app.command("log")
def log_command(
    ctx: typer.Context,
    event: TimeTrackerEvent = typer.Argument(..., help="Event to record."),
    project: Optional[str] = typer.Option(
        None, "--project", help="Project name reported by %project%."
    ),
) -> None:
    """Append a single event record to the log file."""
    preferences: TrackerPreferences = ctx.obj
    _event_logger(preferences, ProcessHost(product_name=project)).log_event(event)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Print the effective preferences as JSON."""
    preferences: TrackerPreferences = ctx.obj
    typer.echo(preferences.snapshot().model_dump_json(indent=2))


@config_app.command("set-log-path")
def config_set_log_path(
    ctx: typer.Context,
    path: Path = typer.Argument(..., path_type=Path, help="Log file to append to."),
) -> None:
    preferences: TrackerPreferences = ctx.obj
    with _saving_preferences(preferences):
        preferences.log_file_path = path
    typer.echo(f"Log file set to {preferences.log_file_path}")


@config_app.command("set-log-line")
def config_set_log_line(
    ctx: typer.Context,
    template: str = typer.Argument(..., help="Template such as '[%date:s%] %event% @ %project%'."),
) -> None:
    preferences: TrackerPreferences = ctx.obj
    with _saving_preferences(preferences):
        preferences.log_line = template
    typer.echo(f"Log line set to {preferences.log_line}")


@config_app.command("set-afk-threshold")
def config_set_afk_threshold(
    ctx: typer.Context,
    seconds: float = typer.Argument(
        ...,
        min=AFK_THRESHOLD_MIN,
        max=AFK_THRESHOLD_MAX,
        help="Seconds of inactivity before the user is considered away.",
    ),
) -> None:
    preferences: TrackerPreferences = ctx.obj
    try:
        with _saving_preferences(preferences):
            preferences.afk_threshold = seconds
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_hint="SECONDS") from exc
    typer.echo(f"AFK threshold set to {preferences.afk_threshold:g} seconds")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Restore the default preferences."""
    preferences: TrackerPreferences = ctx.obj
    with _saving_preferences(preferences):
        preferences.reset()
    typer.echo("Preferences reset to defaults.")
