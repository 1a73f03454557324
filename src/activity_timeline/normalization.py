"""Utilities to normalize form input into draft fields."""

from __future__ import annotations

import re
from datetime import date, time
from typing import Optional

from .errors import InvalidInputError

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")
_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def normalize_time_of_day(value: Optional[str]) -> Optional[time]:
    """Parse ``HH:MM`` (seconds are accepted and dropped); blank means unset."""
    if value is None or not value.strip():
        return None
    match = _TIME_PATTERN.match(value)
    if not match:
        raise InvalidInputError(f"Invalid time of day: {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidInputError(f"Invalid time of day: {value!r}")
    return time(hour, minute)


def normalize_date(value: Optional[str], default: date) -> date:
    if value is None or not value.strip():
        return default
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidInputError(f"Invalid date (expected YYYY-MM-DD): {value!r}") from exc


def normalize_duration(value: Optional[str | int]) -> Optional[int]:
    """Minutes as an integer; blank or ``None`` means unset."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError as exc:
        raise InvalidInputError(f"Duration must be whole minutes: {value!r}") from exc


def normalize_color(value: Optional[str], default: str) -> str:
    if not value:
        return default
    cleaned = value.strip()
    if not _COLOR_PATTERN.match(cleaned):
        raise InvalidInputError(f"Invalid color: {value!r}")
    return cleaned
