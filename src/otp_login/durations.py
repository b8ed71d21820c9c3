"""Duration strings in the ``ms`` package grammar (``"15m"``, ``"7d"``, ``"900000"``)."""

from __future__ import annotations

import re
from datetime import timedelta

_DURATION_RE = re.compile(
    r"^(?P<value>-?(?:\d+)?\.?\d+) *"
    r"(?P<unit>milliseconds?|msecs?|ms|seconds?|secs?|s|minutes?|mins?|m"
    r"|hours?|hrs?|h|days?|d|weeks?|w|years?|yrs?|y)?$",
    re.IGNORECASE,
)

_MS_PER_UNIT: dict[str, float] = {
    "ms": 1,
    "s": 1_000,
    "m": 60_000,
    "h": 3_600_000,
    "d": 86_400_000,
    "w": 604_800_000,
    "y": 31_557_600_000,  # 365.25 days
}


def _unit_key(unit: str) -> str:
    unit = unit.lower()
    if unit.startswith(("ms", "millisecond")):
        return "ms"
    return unit[0]


def parse_duration(text: str) -> timedelta:
    """Parse a duration string into a :class:`~datetime.timedelta`.

    A bare number is read as milliseconds.  Raises ``ValueError`` for
    anything that does not match the grammar.
    """
    if not isinstance(text, str) or not text.strip() or len(text) > 100:
        raise ValueError(f"Invalid duration: {text!r}")

    match = _DURATION_RE.match(text.strip())
    if match is None:
        raise ValueError(f"Invalid duration: {text!r}")

    value = float(match.group("value"))
    unit = match.group("unit")
    factor = _MS_PER_UNIT[_unit_key(unit)] if unit else 1
    return timedelta(milliseconds=value * factor)


def to_milliseconds(delta: timedelta) -> int:
    """Whole milliseconds in *delta*."""
    return delta // timedelta(milliseconds=1)
