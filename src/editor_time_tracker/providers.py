"""Built-in value providers for log line templates.

Format strings follow the conventions editor users already know from the
host's preferences panel: .NET style standard date specifiers (``s``, ``u``,
``o`` ...), custom date patterns (``yyyy-MM-dd HH:mm``) and numeric
specifiers (``F2``, ``D5``, ``X`` ...). Date formats containing ``%`` are
handed to ``strftime`` as is; other numeric formats go to :func:`format`.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Callable, Optional

import psutil

from .events import TimeTrackerEvent
from .formatting import ValueProviderRegistry
from .host import EditorHost

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_STANDARD_DATE_FORMATS: dict[str, str] = {
    "d": "%m/%d/%Y",
    "D": "%A, %d %B %Y",
    "f": "%A, %d %B %Y %H:%M",
    "F": "%A, %d %B %Y %H:%M:%S",
    "g": "%m/%d/%Y %H:%M",
    "G": "%m/%d/%Y %H:%M:%S",
    "s": "%Y-%m-%dT%H:%M:%S",
    "u": "%Y-%m-%d %H:%M:%SZ",
    "t": "%H:%M",
    "T": "%H:%M:%S",
}

_STANDARD_NUMERIC_PATTERN = re.compile(r"^(?P<kind>[FfNnDdXxEePpGg])(?P<precision>\d{0,2})$")
_ZERO_PLACEHOLDER_PATTERN = re.compile(r"^(?P<integer>0+)(?:\.(?P<fraction>0+))?$")


_CUSTOM_DATE_TOKEN_PATTERN = re.compile(
    r"yyyy|yy|MMMM|MMM|MM|dddd|ddd|dd|HH|hh|mm|ss|fff|ff|tt|'[^']*'|\"[^\"]*\"|\\.|.",
    re.DOTALL,
)

_CUSTOM_DATE_DIRECTIVES: dict[str, str] = {
    "yyyy": "%Y",
    "yy": "%y",
    "MMMM": "%B",
    "MMM": "%b",
    "MM": "%m",
    "dddd": "%A",
    "ddd": "%a",
    "dd": "%d",
    "HH": "%H",
    "hh": "%I",
    "mm": "%M",
    "ss": "%S",
    "tt": "%p",
}


def format_date(value: datetime, fmt: Optional[str]) -> str:
    if not fmt:
        return value.strftime(DEFAULT_DATE_FORMAT)
    if fmt in ("o", "O"):
        return value.isoformat(timespec="microseconds")
    if fmt in _STANDARD_DATE_FORMATS:
        return value.strftime(_STANDARD_DATE_FORMATS[fmt])
    if "%" in fmt:
        return value.strftime(fmt)
    return value.strftime(_custom_date_pattern(value, fmt))


def _custom_date_pattern(value: datetime, fmt: str) -> str:
    """Translate a .NET custom date format such as ``yyyy-MM-dd HH:mm`` to strftime."""
    parts: list[str] = []
    for token in _CUSTOM_DATE_TOKEN_PATTERN.findall(fmt):
        directive = _CUSTOM_DATE_DIRECTIVES.get(token)
        if directive is not None:
            parts.append(directive)
            continue
        if token == "fff":
            literal = f"{value.microsecond // 1000:03d}"
        elif token == "ff":
            literal = f"{value.microsecond // 10000:02d}"
        elif len(token) >= 2 and token[0] in "'\"":
            literal = token[1:-1]
        elif len(token) == 2 and token[0] == "\\":
            literal = token[1]
        else:
            literal = token
        parts.append(literal.replace("%", "%%"))
    return "".join(parts)


def format_number(value: float | int, fmt: Optional[str]) -> str:
    if not fmt:
        return str(value)
    return format(value, _numeric_spec(fmt, isinstance(value, int)))


def _numeric_spec(fmt: str, integral: bool) -> str:
    match = _STANDARD_NUMERIC_PATTERN.match(fmt)
    if match:
        kind = match.group("kind")
        precision = match.group("precision")
        upper = kind.upper()
        if upper == "F":
            return f".{precision or 2}f"
        if upper == "N":
            return f",.{precision or 2}f"
        if upper == "D":
            return f"0{precision}d" if precision else "d"
        if upper == "X":
            return f"0{precision}{kind}" if precision else kind
        if upper == "E":
            return f".{precision or 6}{kind}"
        if upper == "P":
            return f".{precision or 2}%"
        return f".{precision}g" if precision else ""

    match = _ZERO_PLACEHOLDER_PATTERN.match(fmt)
    if match:
        digits = len(match.group("integer"))
        fraction = len(match.group("fraction") or "")
        if integral and not fraction:
            return f"0{digits}d"
        width = digits + (fraction + 1 if fraction else 0)
        return f"0{width}.{fraction}f"

    return fmt


def build_default_registry(
    host: EditorHost,
    clock: Callable[[], datetime] = datetime.now,
) -> ValueProviderRegistry:
    """Create a registry holding the built-in providers.

    The registry is returned unfrozen so callers can register their own
    providers before calling :meth:`ValueProviderRegistry.freeze`.
    """
    process = psutil.Process()
    registry = ValueProviderRegistry()
    registry.register("project", lambda event, fmt: host.get_product_name())
    registry.register("date", lambda event, fmt: format_date(clock(), fmt))
    registry.register(
        "timeSinceStartup",
        lambda event, fmt: format_number(float(host.get_session_elapsed_seconds()), fmt),
    )
    registry.register("event", _event_name)
    registry.register("PID", lambda event, fmt: format_number(process.pid, fmt))
    return registry


def _event_name(event: TimeTrackerEvent, fmt: Optional[str]) -> str:
    return event.value
