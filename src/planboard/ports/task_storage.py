"""Task persistence interface."""

from typing import Protocol

from planboard.core.tasks import Task


class TaskStorage(Protocol):
    """Interface for the persisted task collection (one logical document)."""

    def load_tasks(self) -> list[Task]:
        """Load all tasks. Malformed or missing data yields an empty list."""
        ...

    def save_tasks(self, tasks: list[Task]) -> None:
        """Overwrite the stored collection with these tasks."""
        ...
