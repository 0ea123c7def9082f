"""Functional core - pure business logic with no I/O."""

from .datekey import to_key, from_key, today_key
from .errors import PlanboardError, InvalidKey, NotFound, ParseFailure, VirtualBookingError
from .tasks import Task, TaskStatus, TaskPriority, parse_task_list
from .store import TaskStore
from .bookings import (
    ALL_DAY,
    Booking,
    BookingBook,
    BookingStatus,
    Statistics,
    merge,
    statistics,
    sort_by_time,
)
from .filters import ALL, DueWindow, FilterCriteria, filter_tasks, classify_due
from .grid import CalendarDay, build_month, build_week, shift_month, shift_week

__all__ = [
    # Date keys
    "to_key",
    "from_key",
    "today_key",
    # Errors
    "PlanboardError",
    "InvalidKey",
    "NotFound",
    "ParseFailure",
    "VirtualBookingError",
    # Tasks
    "Task",
    "TaskStatus",
    "TaskPriority",
    "parse_task_list",
    "TaskStore",
    # Bookings
    "ALL_DAY",
    "Booking",
    "BookingBook",
    "BookingStatus",
    "Statistics",
    "merge",
    "statistics",
    "sort_by_time",
    # Filters
    "ALL",
    "DueWindow",
    "FilterCriteria",
    "filter_tasks",
    "classify_due",
    # Grid
    "CalendarDay",
    "build_month",
    "build_week",
    "shift_month",
    "shift_week",
]
