"""Helpers for locating application directories."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_path


APP_NAME = "EditorTimeTracker"
APP_AUTHOR = "EditorTimeTracker"

# Overrides the preferences directory, e.g. for portable installs.
HOME_ENV_VAR = "EDITOR_TIME_TRACKER_HOME"

DEFAULT_LOG_FILE_NAME = "time-tracker.log"
PREFERENCES_FILE_NAME = "preferences.json"


def get_preferences_dir() -> Path:
    """Directory holding the preferences file. Not created until something is saved."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return user_config_path(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)


def get_preferences_path() -> Path:
    return get_preferences_dir() / PREFERENCES_FILE_NAME


def get_default_log_path() -> Path:
    """The default log file, resolved against the current working directory."""
    return Path.cwd() / DEFAULT_LOG_FILE_NAME
