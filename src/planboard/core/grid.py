"""Calendar grid layout - pure date arithmetic over the merged booking view."""

import calendar
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta

from .bookings import Booking
from .datekey import to_key

GRID_DAYS = 42
WEEK_DAYS = 7


@dataclass
class CalendarDay:
    """One cell of a calendar view."""

    date: date
    bookings: list[Booking] = field(default_factory=list)
    is_current_month: bool = False
    is_today: bool = False


def start_of_week(day: date) -> date:
    """The Sunday on or before the given day."""
    # weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _build(
    start: date,
    count: int,
    month: int,
    view: Mapping[str, list[Booking]],
    today: date,
) -> list[CalendarDay]:
    days = []
    for offset in range(count):
        day = start + timedelta(days=offset)
        days.append(
            CalendarDay(
                date=day,
                bookings=list(view.get(to_key(day), [])),
                is_current_month=day.month == month,
                is_today=day == today,
            )
        )
    return days


def build_month(
    anchor: date,
    view: Mapping[str, list[Booking]],
    today: date | None = None,
) -> list[CalendarDay]:
    """
    Six full weeks covering the anchor's month.

    Starts on the Sunday on or before the 1st and always yields 42 days,
    including lead and trail days from the adjacent months.
    """
    today = today or date.today()
    first = anchor.replace(day=1)
    return _build(start_of_week(first), GRID_DAYS, anchor.month, view, today)


def build_week(
    anchor: date,
    view: Mapping[str, list[Booking]],
    today: date | None = None,
) -> list[CalendarDay]:
    """The Sunday-to-Saturday week containing the anchor."""
    today = today or date.today()
    return _build(start_of_week(anchor), WEEK_DAYS, anchor.month, view, today)


def shift_month(anchor: date, months: int) -> date:
    """Move the anchor by whole months, clamping the day to the target month's length."""
    index = anchor.year * 12 + (anchor.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def shift_week(anchor: date, weeks: int) -> date:
    return anchor + timedelta(days=7 * weeks)


def reset_anchor() -> date:
    """Anchor for the 'today' navigation button."""
    return date.today()
