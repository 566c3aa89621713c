"""Append rendered events to the tracker's log file."""

from __future__ import annotations

import logging
import threading

from .config import TrackerPreferences
from .events import TimeTrackerEvent
from .formatting import ValueProviderRegistry, render

logger = logging.getLogger(__name__)


class EventLogger:
    """Writes one line per event to the configured log file.

    Write failures are reported through :mod:`logging` and the event is
    dropped; the caller is never interrupted.
    """

    encoding = "utf-8"

    def __init__(self, preferences: TrackerPreferences, providers: ValueProviderRegistry) -> None:
        self.preferences = preferences
        self.providers = providers
        self._lock = threading.Lock()

    def format_event(self, event: TimeTrackerEvent) -> str:
        return render(self.preferences.log_line, event, self.providers)

    def log_event(self, event: TimeTrackerEvent) -> None:
        self.append_line(self.format_event(event))

    __call__ = log_event

    def append_line(self, line: str) -> None:
        path = self.preferences.log_file_path
        with self._lock:
            try:
                # Text mode writes the platform line terminator for "\n".
                with open(path, "a", encoding=self.encoding) as handle:
                    handle.write(line + "\n")
            except (OSError, ValueError):
                logger.exception("Could not append event record.")
                logger.warning('Failed to write log to file "%s"', path)
