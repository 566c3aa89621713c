"""Log line templating.

Templates contain ``%name%`` or ``%name:format%`` placeholders. Each name is
looked up in a :class:`ValueProviderRegistry` and replaced by the provider's
output. Unknown names and failing providers leave the placeholder untouched.
There is no escape sequence for a literal ``%``.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterator, Optional

from .events import TimeTrackerEvent

logger = logging.getLogger(__name__)

ValueProvider = Callable[[TimeTrackerEvent, Optional[str]], str]

TOKEN_PATTERN = re.compile(r"%(?P<name>.+?)(?::(?P<format>.+?))?%")


class ValueProviderRegistry:
    """Named value providers available to log line templates."""

    def __init__(self) -> None:
        self._providers: dict[str, ValueProvider] = {}
        self._frozen = False

    def register(self, name: str, provider: ValueProvider) -> None:
        if self._frozen:
            raise RuntimeError("Value providers cannot be registered after startup.")
        if not name:
            raise ValueError("Provider name must not be empty.")
        if name in self._providers:
            raise ValueError(f"A value provider named {name!r} is already registered.")
        self._providers[name] = provider

    def freeze(self) -> "ValueProviderRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Optional[ValueProvider]:
        return self._providers.get(name)

    def names(self) -> list[str]:
        return list(self._providers)

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)


def render(template: str, event: TimeTrackerEvent, providers: ValueProviderRegistry) -> str:
    """Substitute every placeholder in ``template`` for ``event``. Never raises."""

    def _substitute(match: re.Match[str]) -> str:
        name = match.group("name")
        provider = providers.get(name)
        if provider is None:
            return match.group(0)
        try:
            return str(provider(event, match.group("format") or ""))
        except Exception:
            logger.debug("Value provider %r failed for %s", name, event, exc_info=True)
            return match.group(0)

    return TOKEN_PATTERN.sub(_substitute, template)


def preview_values(
    providers: ValueProviderRegistry, event: TimeTrackerEvent
) -> list[tuple[str, str]]:
    """Each provider's unformatted output for ``event``, as shown in the preferences panel.

    Providers are called with ``format=None``; a failing provider shows its token.
    """
    rows: list[tuple[str, str]] = []
    for name in providers:
        token = f"%{name}%"
        provider = providers.get(name)
        try:
            value = str(provider(event, None)) if provider is not None else token
        except Exception:
            logger.debug("Value provider %r failed for %s", name, event, exc_info=True)
            value = token
        rows.append((token, value))
    return rows
