"""Task import/export interface."""

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Protocol

from planboard.core.tasks import Task

FileSelector = Callable[[], Awaitable[Path | None]]


class TaskTransfer(Protocol):
    """Interface for moving the task list in and out as a file."""

    def export_tasks(self, tasks: list[Task], directory: Path | None = None) -> Path:
        """Write the task list and return the path of the artifact."""
        ...

    async def import_tasks(self, select_file: FileSelector, timeout: float | None = None) -> list[Task]:
        """Read a task list from a user-selected file. Never raises; failures yield []."""
        ...
