"""Discrete events recorded by the tracker and the host signals that drive them."""

from __future__ import annotations

from enum import Enum


class TimeTrackerEvent(str, Enum):
    """A single loggable occurrence. The value is the name written to the log."""

    TRACKER_STARTED = "tracker-started"
    TRACKER_DESTROYED = "tracker-destroyed"
    EDITOR_START = "editor-start"
    EDITOR_CLOSE = "editor-close"
    PLAYMODE_ENTER = "playmode-enter"
    PLAYMODE_EXIT = "playmode-exit"
    PLAYMODE_PAUSE = "playmode-pause"
    PLAYMODE_UNPAUSE = "playmode-unpause"
    EDITOR_FOCUS = "editor-focus"
    EDITOR_BLUR = "editor-blur"
    USER_AFK = "user-afk"
    USER_INTERACTION = "user-interaction"

    @property
    def label(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


class PlayModeChange(str, Enum):
    ENTERED_EDIT_MODE = "entered-edit-mode"
    EXITING_EDIT_MODE = "exiting-edit-mode"
    ENTERED_PLAY_MODE = "entered-play-mode"
    EXITING_PLAY_MODE = "exiting-play-mode"


class PauseState(str, Enum):
    PAUSED = "paused"
    UNPAUSED = "unpaused"
