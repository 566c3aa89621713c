"""Interfaces to the editor hosting the tracker."""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

import psutil

logger = logging.getLogger(__name__)


class EditorHost(Protocol):
    """Signals the tracker polls from the editor."""

    def get_focus_state(self) -> bool: ...

    def get_session_elapsed_seconds(self) -> float: ...

    def get_product_name(self) -> str: ...

    def is_playing(self) -> bool: ...


class ProcessHost:
    """Host for running outside an editor, e.g. from the command line.

    The session starts when the current process was created. The window is
    always considered focused and play mode is never active.
    """

    def __init__(self, product_name: Optional[str] = None) -> None:
        self._product_name = product_name or Path.cwd().name
        self._created_at = psutil.Process().create_time()

    def get_focus_state(self) -> bool:
        return True

    def get_session_elapsed_seconds(self) -> float:
        return max(time.time() - self._created_at, 0.0)

    def get_product_name(self) -> str:
        return self._product_name

    def is_playing(self) -> bool:
        return False


class Hook(str, Enum):
    STARTUP = "startup"
    SHUTDOWN = "shutdown"
    TICK = "tick"
    FOCUS_CHANGE = "focus-change"
    PLAY_MODE_CHANGE = "play-mode-change"
    PAUSE_CHANGE = "pause-change"
    USER_INPUT = "user-input"


class LifecycleDispatcher(Protocol):
    def connect(self, hook: Hook, handler: Callable[..., Any]) -> None: ...

    def disconnect(self, hook: Hook, handler: Callable[..., Any]) -> None: ...


class HookDispatcher:
    """In-process dispatcher for hosts that do not bring their own."""

    def __init__(self) -> None:
        self._handlers: defaultdict[Hook, list[Callable[..., Any]]] = defaultdict(list)

    def connect(self, hook: Hook, handler: Callable[..., Any]) -> None:
        self._handlers[Hook(hook)].append(handler)

    def disconnect(self, hook: Hook, handler: Callable[..., Any]) -> None:
        try:
            self._handlers[Hook(hook)].remove(handler)
        except ValueError:
            pass

    def handlers(self, hook: Hook) -> list[Callable[..., Any]]:
        return list(self._handlers.get(Hook(hook), ()))

    def fire(self, hook: Hook, *args: Any) -> None:
        """Invoke every handler for ``hook`` in connection order."""
        for handler in self.handlers(hook):
            try:
                handler(*args)
            except Exception:
                logger.exception("Handler %r failed for hook %s", handler, Hook(hook).value)
