"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from .datekey import from_key, to_key
from .errors import InvalidKey, ParseFailure


class TaskStatus(Enum):
    """Kanban column a task sits in."""

    TODO = "todo"
    DOING = "doing"
    DONE = "done"


class TaskPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Task:
    """A Kanban task. Frozen so snapshots handed out by the store stay immutable."""

    id: str
    title: str
    created_at: datetime
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None

    @property
    def due_key(self) -> str | None:
        """Canonical date key of the due date, if any."""
        return to_key(self.due_date) if self.due_date else None

    def days_until_due(self, as_of: date | None = None) -> int | None:
        """Days until due date (negative if overdue)."""
        if not self.due_date:
            return None
        as_of = as_of or date.today()
        return (self.due_date - as_of).days

    def to_dict(self) -> dict:
        """Serialize to the camelCase wire format used by storage and export."""
        data = {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority.value,
            "createdAt": self.created_at.isoformat(),
        }
        if self.description is not None:
            data["description"] = self.description
        if self.due_date is not None:
            data["dueDate"] = to_key(self.due_date)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create a Task from its wire format. Raises ParseFailure."""
        if not isinstance(data, dict):
            raise ParseFailure(f"Task record must be an object, got {type(data).__name__}")

        task_id = data.get("id")
        title = data.get("title")
        if not isinstance(task_id, str) or not task_id:
            raise ParseFailure(f"Task record has no valid id: {data!r}")
        if not isinstance(title, str):
            raise ParseFailure(f"Task {task_id} has no valid title")

        description = data.get("description")
        if description is not None and not isinstance(description, str):
            raise ParseFailure(f"Task {task_id} has a non-text description")

        try:
            status = TaskStatus(data.get("status", TaskStatus.TODO.value))
            priority = TaskPriority(data.get("priority", TaskPriority.MEDIUM.value))
        except ValueError as e:
            raise ParseFailure(f"Task {task_id}: {e}") from e

        due = None
        if data.get("dueDate"):
            try:
                due = from_key(data["dueDate"])
            except InvalidKey as e:
                raise ParseFailure(f"Task {task_id}: {e}") from e

        created_raw = data.get("createdAt")
        try:
            created_at = datetime.fromisoformat(created_raw) if created_raw else datetime.now()
        except (TypeError, ValueError) as e:
            raise ParseFailure(f"Task {task_id} has an invalid createdAt: {created_raw!r}") from e

        return cls(
            id=task_id,
            title=title,
            created_at=created_at,
            description=description,
            status=status,
            priority=priority,
            due_date=due,
        )


def parse_task_list(data: object) -> list[Task]:
    """
    Parse a decoded JSON document into tasks.

    The whole document is rejected if it is not an array, any record is
    malformed, or two records share an id. Raises ParseFailure.
    """
    if not isinstance(data, list):
        raise ParseFailure(f"Expected a task array, got {type(data).__name__}")
    tasks = [Task.from_dict(item) for item in data]
    seen: set[str] = set()
    for task in tasks:
        if task.id in seen:
            raise ParseFailure(f"Duplicate task id: {task.id}")
        seen.add(task.id)
    return tasks


def filter_by_status(tasks: list[Task], status: TaskStatus) -> list[Task]:
    """Tasks in a single Kanban column, order preserved."""
    return [t for t in tasks if t.status == status]


def filter_by_due_key(tasks: list[Task], key: str) -> list[Task]:
    """Tasks due on the given date key."""
    return [t for t in tasks if t.due_key == key]
