"""Activity state machine deriving discrete events from polled editor signals."""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from typing import Any, Callable, Optional

from .config import TrackerPreferences
from .events import PauseState, PlayModeChange, TimeTrackerEvent
from .host import EditorHost

logger = logging.getLogger(__name__)

EventSink = Callable[[TimeTrackerEvent], None]

_PLAY_MODE_EVENTS = {
    PlayModeChange.ENTERED_PLAY_MODE: TimeTrackerEvent.PLAYMODE_ENTER,
    PlayModeChange.EXITING_PLAY_MODE: TimeTrackerEvent.PLAYMODE_EXIT,
}

_PAUSE_EVENTS = {
    PauseState.PAUSED: TimeTrackerEvent.PLAYMODE_PAUSE,
    PauseState.UNPAUSED: TimeTrackerEvent.PLAYMODE_UNPAUSE,
}


@dataclass(slots=True)
class ActivityState:
    """Tracker state a host may persist across reloads."""

    focused: bool = False
    last_interaction: float = 0.0
    is_afk: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActivityState":
        return cls(
            focused=bool(data.get("focused", False)),
            last_interaction=float(data.get("last_interaction", 0.0)),
            is_afk=bool(data.get("is_afk", False)),
        )


class ActivityTracker:
    """Compares host signals against the previous observation once per tick.

    Focus and AFK transitions are polled in :meth:`tick`; play mode and pause
    transitions arrive as host callbacks and are forwarded directly.
    """

    def __init__(
        self,
        host: EditorHost,
        emit: EventSink,
        preferences: TrackerPreferences,
        state: Optional[ActivityState] = None,
    ) -> None:
        self.host = host
        self.preferences = preferences
        self._emit = emit
        self._lock = threading.Lock()
        self._state = state or ActivityState(focused=host.get_focus_state())
        self._started = False
        self._closed = False

    @property
    def state(self) -> ActivityState:
        return self._state

    def start(self) -> None:
        with self._lock:
            if self._started:
                return
            self._started = True
        logger.info("Tracker started for %s", self.host.get_product_name())
        self._emit(TimeTrackerEvent.EDITOR_START)
        self._emit(TimeTrackerEvent.TRACKER_STARTED)

    def shutdown(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._emit(TimeTrackerEvent.EDITOR_CLOSE)
        self._emit(TimeTrackerEvent.TRACKER_DESTROYED)
        logger.info("Tracker stopped.")

    def tick(self) -> None:
        self.check_focus()

        now = self.host.get_session_elapsed_seconds()
        playing = self.host.is_playing()
        threshold = self.preferences.afk_threshold
        with self._lock:
            # Play mode counts as interaction on every tick.
            if playing:
                self._state.last_interaction = now
            afk = now - self._state.last_interaction > threshold
            if afk == self._state.is_afk:
                return
            self._state.is_afk = afk
        logger.debug("AFK state changed: afk=%s now=%.1f threshold=%.1f", afk, now, threshold)
        self._emit(TimeTrackerEvent.USER_AFK if afk else TimeTrackerEvent.USER_INTERACTION)

    def check_focus(self) -> None:
        focused = bool(self.host.get_focus_state())
        with self._lock:
            if focused == self._state.focused:
                return
            self._state.focused = focused
        self._emit(TimeTrackerEvent.EDITOR_FOCUS if focused else TimeTrackerEvent.EDITOR_BLUR)

    def on_user_input(self, *_: Any) -> None:
        now = self.host.get_session_elapsed_seconds()
        with self._lock:
            self._state.last_interaction = now

    def on_play_mode_change(self, change: PlayModeChange) -> None:
        event = _PLAY_MODE_EVENTS.get(PlayModeChange(change))
        if event is not None:
            self._emit(event)

    def on_pause_change(self, state: PauseState) -> None:
        self._emit(_PAUSE_EVENTS[PauseState(state)])
