"""Shared fixtures."""

from datetime import date, datetime

import pytest

from planboard.core.tasks import Task


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def make_task():
    """Factory for creating tasks."""

    def _make(task_id: str = "1", title: str = "Task", **kwargs) -> Task:
        kwargs.setdefault("created_at", datetime(2025, 1, 1, 9, 0))
        return Task(id=task_id, title=title, **kwargs)

    return _make
