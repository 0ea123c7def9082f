"""Shared workflow layer between the CLI and the core.

Resolves adapters from config and wires them into the core so commands only
deal with arguments and output.
"""

import asyncio
import logging
from datetime import date
from pathlib import Path

from .adapters.file_transfer import FileTransfer
from .adapters.json_storage import JsonBookingStorage, JsonTaskStorage
from .adapters.local_auth import LocalAuth
from .config import Config
from .core.bookings import BookingBook, BookingView, merge
from .core.grid import CalendarDay, build_month, build_week
from .core.store import TaskStore

logger = logging.getLogger(__name__)


def get_task_store(config: Config) -> TaskStore:
    """Task store backed by the configured data directory."""
    return TaskStore(JsonTaskStorage(config.data_path))


def get_booking_book(config: Config) -> BookingBook:
    """Manual booking map backed by the configured data directory."""
    return BookingBook(JsonBookingStorage(config.data_path))


def get_transfer(config: Config) -> FileTransfer:
    return FileTransfer(config.export_path)


def get_auth(config: Config) -> LocalAuth:
    return LocalAuth(config.data_path)


def current_view(store: TaskStore, book: BookingBook, config: Config) -> BookingView:
    """Merge a consistent snapshot pair of tasks and manual bookings."""
    return merge(store.list(), book.snapshot(), time_label=config.all_day_label)


def month_calendar(config: Config, anchor: date) -> list[CalendarDay]:
    store = get_task_store(config)
    book = get_booking_book(config)
    return build_month(anchor, current_view(store, book, config))


def week_calendar(config: Config, anchor: date) -> list[CalendarDay]:
    store = get_task_store(config)
    book = get_booking_book(config)
    return build_week(anchor, current_view(store, book, config))


def import_file(store: TaskStore, transfer: FileTransfer, path: Path | None, config: Config) -> int:
    """
    Import tasks from a file into the store.

    The store is only replaced when the file yields at least one task.
    Returns the number of tasks imported.
    """

    async def select_file() -> Path | None:
        return path

    tasks = asyncio.run(transfer.import_tasks(select_file, timeout=config.import_timeout))
    if tasks:
        store.replace_all(tasks)
    else:
        logger.info("Nothing imported; keeping existing tasks")
    return len(tasks)
