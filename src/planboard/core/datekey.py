"""Canonical date keys - local calendar dates as YYYY-MM-DD strings."""

import re
from datetime import date, datetime

from .errors import InvalidKey

_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def to_key(value: date | datetime) -> str:
    """
    Format a date as its canonical key.

    Uses the value's own year/month/day. Datetimes are never converted to UTC,
    so a late-evening local time keeps its calendar day.
    """
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def from_key(key: str) -> date:
    """Parse a canonical key back into a date. Raises InvalidKey."""
    match = _KEY_PATTERN.match(key) if isinstance(key, str) else None
    if not match:
        raise InvalidKey(f"Invalid date key: {key!r}")
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidKey(f"Invalid date key: {key!r} ({e})") from e


def today_key() -> str:
    """Key for the local system date."""
    return to_key(date.today())
