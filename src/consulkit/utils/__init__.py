"""Utility helpers: log sanitization and Go-style durations."""

from consulkit.utils.durations import format_duration, format_wait, is_duration, parse_duration
from consulkit.utils.sanitization import sanitize_token, sanitize_url

__all__ = [
    "format_duration",
    "format_wait",
    "is_duration",
    "parse_duration",
    "sanitize_token",
    "sanitize_url",
]
