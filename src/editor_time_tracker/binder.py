"""Wire an :class:`ActivityTracker` to the host's lifecycle hooks."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from .host import Hook, HookDispatcher, LifecycleDispatcher
from .tracker import ActivityTracker

logger = logging.getLogger(__name__)


class LifecycleBinder:
    def __init__(self, tracker: ActivityTracker) -> None:
        self.tracker = tracker
        self._dispatcher: Optional[LifecycleDispatcher] = None
        self._bindings: list[tuple[Hook, Callable[..., Any]]] = []

    def handlers(self) -> list[tuple[Hook, Callable[..., Any]]]:
        tracker = self.tracker
        return [
            (Hook.STARTUP, tracker.start),
            (Hook.SHUTDOWN, tracker.shutdown),
            (Hook.TICK, tracker.tick),
            (Hook.FOCUS_CHANGE, tracker.check_focus),
            (Hook.PLAY_MODE_CHANGE, tracker.on_play_mode_change),
            (Hook.PAUSE_CHANGE, tracker.on_pause_change),
            (Hook.USER_INPUT, tracker.on_user_input),
        ]

    def subscribe(self, dispatcher: LifecycleDispatcher) -> None:
        if self._dispatcher is not None:
            raise RuntimeError("Tracker is already subscribed to a dispatcher.")
        bindings = self.handlers()
        for hook, handler in bindings:
            dispatcher.connect(hook, handler)
        self._dispatcher = dispatcher
        self._bindings = bindings
        logger.debug("Subscribed %d lifecycle handlers.", len(bindings))

    def unsubscribe(self) -> None:
        if self._dispatcher is None:
            return
        for hook, handler in self._bindings:
            self._dispatcher.disconnect(hook, handler)
        self._dispatcher = None
        self._bindings = []

    @property
    def subscribed(self) -> bool:
        return self._dispatcher is not None


def run_session(
    dispatcher: HookDispatcher,
    *,
    interval: float,
    stop_event: Optional[threading.Event] = None,
    max_ticks: Optional[int] = None,
) -> int:
    """Fire startup, tick every ``interval`` seconds, then always fire shutdown.

    Runs until ``stop_event`` is set, ``max_ticks`` ticks have fired or the
    process is interrupted. Returns the number of ticks fired.
    """
    stop_event = stop_event or threading.Event()
    ticks = 0
    dispatcher.fire(Hook.STARTUP)
    try:
        while not stop_event.is_set():
            dispatcher.fire(Hook.TICK)
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            stop_event.wait(interval)
    except KeyboardInterrupt:
        logger.info("Session interrupted after %d ticks.", ticks)
    finally:
        dispatcher.fire(Hook.SHUTDOWN)
    return ticks
