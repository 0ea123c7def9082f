"""JSON file storage adapters for tasks and manual bookings."""

import json
import logging
from pathlib import Path

from planboard.core.bookings import Booking, parse_booking_map
from planboard.core.errors import ParseFailure
from planboard.core.tasks import Task, parse_task_list

logger = logging.getLogger(__name__)

TASKS_FILENAME = "kanban-tasks.json"
BOOKINGS_FILENAME = "bookings.json"


def _read_document(path: Path) -> object | None:
    """Decode a JSON file. Returns None if it is missing, unreadable or not valid JSON."""
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text())
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring unreadable data in {path}: {e}")
        return None


def write_atomic(path: Path, content: str) -> None:
    """Write to a sibling temp file, then rename it over the target."""
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        tmp.write_text(content)
        tmp.replace(path)
    finally:
        tmp.unlink(missing_ok=True)


class JsonTaskStorage:
    """
    Task collection stored as a single JSON array.

    Implements TaskStorage protocol.
    """

    def __init__(self, data_dir: Path | str, filename: str = TASKS_FILENAME):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.path = self.data_dir / filename

    def load_tasks(self) -> list[Task]:
        """Load all tasks; malformed content is treated as no data."""
        data = _read_document(self.path)
        if data is None:
            return []
        try:
            return parse_task_list(data)
        except ParseFailure as e:
            logger.warning(f"Ignoring malformed task data in {self.path}: {e}")
            return []

    def save_tasks(self, tasks: list[Task]) -> None:
        write_atomic(self.path, json.dumps([t.to_dict() for t in tasks], indent=2))


class JsonBookingStorage:
    """
    Manual booking map stored as a JSON object keyed by date.

    Implements BookingStorage protocol.
    """

    def __init__(self, data_dir: Path | str, filename: str = BOOKINGS_FILENAME):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.path = self.data_dir / filename

    def load_bookings(self) -> dict[str, list[Booking]]:
        data = _read_document(self.path)
        if data is None:
            return {}
        try:
            return parse_booking_map(data)
        except ParseFailure as e:
            logger.warning(f"Ignoring malformed booking data in {self.path}: {e}")
            return {}

    def save_bookings(self, bookings: dict[str, list[Booking]]) -> None:
        payload = {key: [b.to_dict() for b in items] for key, items in sorted(bookings.items())}
        write_atomic(self.path, json.dumps(payload, indent=2))
