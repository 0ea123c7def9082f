"""Task store - the single owner of the mutable task collection."""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import TYPE_CHECKING

from .datekey import from_key
from .errors import NotFound, ParseFailure
from .tasks import Task, TaskPriority, TaskStatus, filter_by_due_key, filter_by_status

if TYPE_CHECKING:
    from planboard.ports.task_storage import TaskStorage

logger = logging.getLogger(__name__)

_PATCHABLE = frozenset({"title", "description", "status", "priority", "due_date"})


def _coerce_due(value: date | str | None) -> date | None:
    """Accept a date, a canonical key string, or None. Raises InvalidKey."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return from_key(value)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"due_date must be a date or YYYY-MM-DD string, got {type(value).__name__}")


def _coerce_patch(patch: dict) -> dict:
    """
    Normalize patch values to the Task field types.

    Statuses and priorities may be given as their string values. Raises
    ValueError for unknown values and TypeError for wrong types.
    """
    coerced = dict(patch)
    if "status" in coerced:
        coerced["status"] = TaskStatus(coerced["status"])
    if "priority" in coerced:
        coerced["priority"] = TaskPriority(coerced["priority"])
    if "due_date" in coerced:
        coerced["due_date"] = _coerce_due(coerced["due_date"])
    if "title" in coerced and not isinstance(coerced["title"], str):
        raise TypeError("title must be a string")
    if coerced.get("description") is not None and not isinstance(coerced["description"], str):
        raise TypeError("description must be a string or None")
    return coerced


class TaskStore:
    """
    In-memory task collection with a full-rewrite persistence lifecycle.

    Loads once on construction; every mutation saves the entire collection.
    A mutation only takes effect in memory once the save has succeeded.
    All reads hand out snapshots, never the internal list.
    """

    def __init__(self, storage: TaskStorage | None = None):
        self._storage = storage
        self._tasks: list[Task] = list(storage.load_tasks()) if storage is not None else []
        logger.debug(f"Task store loaded with {len(self._tasks)} tasks")

    def list(self) -> list[Task]:
        """Snapshot of all tasks in insertion order."""
        return list(self._tasks)

    def get(self, task_id: str) -> Task:
        """Look up a task by id. Raises NotFound."""
        return self._tasks[self._index(task_id)]

    def by_status(self, status: TaskStatus | str) -> list[Task]:
        return filter_by_status(self._tasks, TaskStatus(status))

    def for_date(self, key: str) -> list[Task]:
        return filter_by_due_key(self._tasks, key)

    def add(
        self,
        title: str,
        description: str | None = None,
        due_date: date | str | None = None,
    ) -> Task:
        """Create a task in the todo column with medium priority."""
        task = Task(
            id=f"task-{uuid.uuid4().hex}",
            title=title,
            created_at=datetime.now(),
            description=description,
            due_date=_coerce_due(due_date),
        )
        self._commit(self._tasks + [task])
        logger.debug(f"Added task {task.id}")
        return task

    def update(self, task_id: str, **patch) -> Task:
        """
        Apply a partial patch to a task.

        Only title, description, status, priority and due_date may be patched.
        Raises NotFound for unknown ids and TypeError for unknown fields.
        """
        unknown = set(patch) - _PATCHABLE
        if unknown:
            raise TypeError(f"Cannot patch task fields: {', '.join(sorted(unknown))}")

        index = self._index(task_id)
        updated = replace(self._tasks[index], **_coerce_patch(patch))
        tasks = list(self._tasks)
        tasks[index] = updated
        self._commit(tasks)
        logger.debug(f"Updated task {task_id}: {sorted(patch)}")
        return updated

    def move(self, task_id: str, status: TaskStatus | str) -> Task:
        """Move a task to another column."""
        return self.update(task_id, status=status)

    def delete(self, task_id: str) -> None:
        """Remove a task. Raises NotFound."""
        index = self._index(task_id)
        self._commit(self._tasks[:index] + self._tasks[index + 1 :])
        logger.debug(f"Deleted task {task_id}")

    def replace_all(self, tasks: list[Task]) -> None:
        """Swap the entire collection, e.g. after an import. Raises ParseFailure on duplicate ids."""
        seen: set[str] = set()
        for task in tasks:
            if task.id in seen:
                raise ParseFailure(f"Duplicate task id: {task.id}")
            seen.add(task.id)
        self._commit(list(tasks))
        logger.info(f"Replaced task collection with {len(self._tasks)} tasks")

    def _index(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise NotFound(f"Task {task_id} not found")

    def _commit(self, tasks: list[Task]) -> None:
        """Persist the new collection, then make it current."""
        if self._storage is not None:
            self._storage.save_tasks(list(tasks))
        self._tasks = tasks
