"""File-based task import/export adapter."""

import asyncio
import json
import logging
from pathlib import Path

from planboard.core.errors import ParseFailure
from planboard.core.tasks import Task, parse_task_list
from planboard.ports.transfer import FileSelector

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "tasks-data.json"
ACCEPTED_SUFFIX = ".json"


def read_task_file(path: Path) -> list[Task]:
    """Parse an exported task file. Raises ParseFailure."""
    if path.suffix.lower() != ACCEPTED_SUFFIX:
        raise ParseFailure(f"{path.name} is not a {ACCEPTED_SUFFIX} file")
    try:
        data = json.loads(path.read_text())
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseFailure(f"Cannot read {path}: {e}") from e
    return parse_task_list(data)


class FileTransfer:
    """
    Export to and import from a JSON file.

    Implements TaskTransfer protocol.
    """

    def __init__(self, export_dir: Path | str):
        self.export_dir = Path(export_dir).expanduser()

    def export_tasks(self, tasks: list[Task], directory: Path | None = None) -> Path:
        """Write the full task list, pretty-printed, to tasks-data.json."""
        target_dir = Path(directory).expanduser() if directory else self.export_dir
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / EXPORT_FILENAME
        path.write_text(json.dumps([t.to_dict() for t in tasks], indent=2))
        logger.info(f"Exported {len(tasks)} tasks to {path}")
        return path

    async def import_tasks(self, select_file: FileSelector, timeout: float | None = None) -> list[Task]:
        """
        Ask for a file and parse it into tasks.

        Cancellation (selector returns None), an elapsed timeout and any parse
        failure all resolve to an empty list. Replacing the store's contents is
        the caller's job.
        """
        try:
            path = await asyncio.wait_for(select_file(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.info("Import abandoned: no file selected before timeout")
            return []

        if path is None:
            logger.info("Import cancelled")
            return []

        try:
            tasks = await asyncio.to_thread(read_task_file, Path(path))
        except ParseFailure as e:
            logger.warning(f"Import failed: {e}")
            return []

        logger.info(f"Imported {len(tasks)} tasks from {path}")
        return tasks
