"""Go-style duration strings as used by the agent API ("10s", "1m30s", "500ms")."""

from __future__ import annotations

import math
import re
from datetime import timedelta

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_DURATION = re.compile(r"^(?:\d+(?:\.\d+)?(?:ns|us|µs|ms|s|m|h))+$")


def is_duration(value: str) -> bool:
    """Return True if value is a non-empty Go duration string."""
    return bool(value) and _DURATION.match(value) is not None


def parse_duration(value: str) -> timedelta:
    """Parse a Go duration string into a timedelta.

    Raises:
        ValueError: If value is not a valid duration.

    Example:
        >>> parse_duration("1m30s")
        datetime.timedelta(seconds=90)
    """
    if value == "0":
        return timedelta(0)
    if not is_duration(value):
        raise ValueError(f"invalid duration: {value!r}")
    seconds = sum(float(n) * _UNIT_SECONDS[unit] for n, unit in _COMPONENT.findall(value))
    return timedelta(seconds=seconds)


def format_duration(value: timedelta) -> str:
    """Format a timedelta as a Go duration string.

    Renders in the coarsest unit that keeps the value exact: ``"<n>s"``,
    ``"<n>ms"`` or ``"<n>us"``.

    Example:
        >>> format_duration(timedelta(minutes=1))
        '60s'
        >>> format_duration(timedelta(milliseconds=1500))
        '1500ms'
    """
    if value < timedelta(0):
        raise ValueError(f"negative duration: {value!r}")
    micros = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    if micros % 1_000_000 == 0:
        return f"{micros // 1_000_000}s"
    if micros % 1000 == 0:
        return f"{micros // 1000}ms"
    return f"{micros}us"


def format_wait(value: timedelta) -> str:
    """Format a blocking-query wait budget as whole seconds, rounding up."""
    return f"{math.ceil(value.total_seconds())}s"


__all__ = ["format_duration", "format_wait", "is_duration", "parse_duration"]
