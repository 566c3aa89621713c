"""Persisted preferences for the tracker."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, PositiveFloat, TypeAdapter

from .paths import get_default_log_path

logger = logging.getLogger(__name__)


LOG_FILE_PATH_KEY = "TimeTracker_LogFilePath"
LOG_LINE_KEY = "TimeTracker_LogLine"
AFK_THRESHOLD_KEY = "TimeTracker_AFKThreshold"

DEFAULT_LOG_LINE = "[%date:s%] %event% @ %project%"
DEFAULT_AFK_THRESHOLD = 60.0

# Range offered by the preferences UI. The tracker itself accepts any positive value.
AFK_THRESHOLD_MIN = 30.0
AFK_THRESHOLD_MAX = 30.0 * 60

_positive_float = TypeAdapter(PositiveFloat)


class TrackerSettings(BaseModel):
    """Point-in-time view of the effective preferences."""

    log_file_path: str
    log_line: str = DEFAULT_LOG_LINE
    afk_threshold: PositiveFloat = DEFAULT_AFK_THRESHOLD

    model_config = ConfigDict(extra="forbid")


class PreferencesStore:
    """Key/value store persisted as a flat JSON object.

    With ``path=None`` values only live in memory, which is what embedding hosts
    with their own persistence and the tests use.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._lock = threading.Lock()
        self._values: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable preferences file %s", self.path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s; expected a JSON object.", self.path)
            return {}
        return data

    def _save_locked(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")

    def get_string(self, key: str, default: str) -> str:
        with self._lock:
            value = self._values.get(key)
        return value if isinstance(value, str) else default

    def set_string(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = str(value)
            self._save_locked()

    def get_float(self, key: str, default: float) -> float:
        with self._lock:
            value = self._values.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return default
        return float(value)

    def set_float(self, key: str, value: float) -> None:
        with self._lock:
            self._values[key] = float(value)
            self._save_locked()

    def delete(self, key: str) -> None:
        with self._lock:
            if self._values.pop(key, None) is not None:
                self._save_locked()

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
            self._save_locked()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values


class TrackerPreferences:
    """Typed accessors over a :class:`PreferencesStore`.

    Nothing is cached: every property read goes back to the store, so changes
    made elsewhere in the process are picked up on the next event.
    """

    def __init__(self, store: PreferencesStore) -> None:
        self.store = store

    @property
    def log_file_path(self) -> str:
        return self.store.get_string(LOG_FILE_PATH_KEY, str(get_default_log_path()))

    @log_file_path.setter
    def log_file_path(self, value: str | os.PathLike[str]) -> None:
        self.store.set_string(LOG_FILE_PATH_KEY, os.path.abspath(os.fspath(value)))

    @property
    def log_line(self) -> str:
        return self.store.get_string(LOG_LINE_KEY, DEFAULT_LOG_LINE)

    @log_line.setter
    def log_line(self, value: str) -> None:
        self.store.set_string(LOG_LINE_KEY, value)

    @property
    def afk_threshold(self) -> float:
        return self.store.get_float(AFK_THRESHOLD_KEY, DEFAULT_AFK_THRESHOLD)

    @afk_threshold.setter
    def afk_threshold(self, value: float) -> None:
        self.store.set_float(AFK_THRESHOLD_KEY, _positive_float.validate_python(value))

    def reset(self) -> None:
        for key in (LOG_FILE_PATH_KEY, LOG_LINE_KEY, AFK_THRESHOLD_KEY):
            self.store.delete(key)

    def snapshot(self) -> TrackerSettings:
        return TrackerSettings(
            log_file_path=self.log_file_path,
            log_line=self.log_line,
            afk_threshold=self.afk_threshold,
        )
