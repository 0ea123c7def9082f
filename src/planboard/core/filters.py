"""Compound task filtering for the board view."""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from .tasks import Task, TaskPriority, TaskStatus

ALL = "all"


class DueWindow(Enum):
    """Relative due-date windows, measured in whole days from today."""

    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class FilterCriteria:
    """
    Board filter state.

    status and priority take an enum member, its string value, or "all".
    due takes a DueWindow or its string value. Unknown values raise ValueError.
    """

    search_term: str = ""
    status: TaskStatus | str = ALL
    priority: TaskPriority | str = ALL
    due: DueWindow | str = DueWindow.ALL

    def __post_init__(self):
        if self.status != ALL:
            object.__setattr__(self, "status", TaskStatus(self.status))
        if self.priority != ALL:
            object.__setattr__(self, "priority", TaskPriority(self.priority))
        object.__setattr__(self, "due", DueWindow(self.due))
        object.__setattr__(self, "search_term", self.search_term or "")


def matches_search(task: Task, term: str) -> bool:
    """Case-insensitive substring match on title or description."""
    if not term:
        return True
    needle = term.lower()
    if needle in task.title.lower():
        return True
    return task.description is not None and needle in task.description.lower()


def in_window(days: int, window: DueWindow) -> bool:
    """Whether a day offset from today falls in a due window."""
    match window:
        case DueWindow.ALL:
            return True
        case DueWindow.TODAY:
            return days == 0
        case DueWindow.WEEK:
            return 0 <= days <= 7
        case DueWindow.OVERDUE:
            return days < 0
    return False


def matches_due(task: Task, window: DueWindow, today: date) -> bool:
    """
    Due-window predicate.

    Dateless tasks pass only the "all" window: a relative window cannot
    classify them.
    """
    if window == DueWindow.ALL:
        return True
    days = task.days_until_due(today)
    if days is None:
        return False
    return in_window(days, window)


def filter_tasks(
    tasks: list[Task],
    criteria: FilterCriteria,
    today: date | None = None,
) -> list[Task]:
    """
    Keep tasks that pass every predicate in the criteria.

    Pure function - no I/O.
    """
    today = today or date.today()
    return [
        t
        for t in tasks
        if matches_search(t, criteria.search_term)
        and (criteria.status == ALL or t.status == criteria.status)
        and (criteria.priority == ALL or t.priority == criteria.priority)
        and matches_due(t, criteria.due, today)
    ]


def classify_due(task: Task, today: date | None = None) -> DueWindow | None:
    """Narrowest window a task falls in: overdue, today, week, or None."""
    days = task.days_until_due(today or date.today())
    if days is None:
        return None
    for window in (DueWindow.OVERDUE, DueWindow.TODAY, DueWindow.WEEK):
        if in_window(days, window):
            return window
    return None
