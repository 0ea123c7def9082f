"""Booking aggregation - merges manual bookings with task-derived ones."""

import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from .datekey import from_key, to_key
from .errors import InvalidKey, NotFound, ParseFailure, VirtualBookingError
from .tasks import Task, TaskStatus

if TYPE_CHECKING:
    from planboard.ports.booking_storage import BookingStorage

logger = logging.getLogger(__name__)

ALL_DAY = "all-day"
VIRTUAL_PREFIX = "task-"

BookingView = dict[str, list["Booking"]]


class BookingStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Booking:
    """A calendar booking. Virtual bookings carry the id of their source task."""

    id: str
    title: str
    status: BookingStatus
    time: str
    task_id: str | None = None

    @property
    def is_virtual(self) -> bool:
        return self.task_id is not None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "time": self.time,
        }
        if self.task_id is not None:
            data["taskId"] = self.task_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Booking":
        """Create a Booking from its wire format. Raises ParseFailure."""
        if not isinstance(data, dict):
            raise ParseFailure(f"Booking record must be an object, got {type(data).__name__}")
        try:
            return cls(
                id=str(data["id"]),
                title=str(data["title"]),
                status=BookingStatus(data.get("status", BookingStatus.PENDING.value)),
                time=str(data.get("time", ALL_DAY)),
                task_id=data.get("taskId"),
            )
        except (KeyError, ValueError) as e:
            raise ParseFailure(f"Malformed booking record: {e}") from e


@dataclass(frozen=True)
class Statistics:
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


def virtual_booking(task: Task, time_label: str = ALL_DAY) -> Booking:
    """
    Project a task onto the calendar.

    The id is derived from the task id so re-deriving is idempotent. Status is
    approved for done tasks and pending for everything else.
    """
    status = BookingStatus.APPROVED if task.status == TaskStatus.DONE else BookingStatus.PENDING
    return Booking(
        id=f"{VIRTUAL_PREFIX}{task.id}",
        title=task.title,
        status=status,
        time=time_label,
        task_id=task.id,
    )


def merge(
    tasks: Iterable[Task],
    manual: Mapping[str, Iterable[Booking]],
    time_label: str = ALL_DAY,
) -> BookingView:
    """
    Merge task-derived bookings with manual ones into a per-date view.

    Virtual bookings come first in each bucket, followed by manual bookings
    that are not tagged to a task. Within-bucket order is not a display order;
    use sort_by_time before presenting.

    Pure function - no I/O.
    """
    view: BookingView = {}

    for task in tasks:
        if task.due_date is None:
            continue
        view.setdefault(to_key(task.due_date), []).append(virtual_booking(task, time_label))

    for key, bookings in manual.items():
        bucket = view.setdefault(key, [])
        bucket.extend(b for b in bookings if b.task_id is None)

    return view


def statistics(view: Mapping[str, Iterable[Booking]]) -> Statistics:
    """Count bookings by status across every bucket in a single pass."""
    counts = {status: 0 for status in BookingStatus}
    total = 0
    for bookings in view.values():
        for booking in bookings:
            total += 1
            counts[booking.status] += 1
    return Statistics(
        total=total,
        pending=counts[BookingStatus.PENDING],
        approved=counts[BookingStatus.APPROVED],
        rejected=counts[BookingStatus.REJECTED],
    )


def status_counts(bookings: Iterable[Booking]) -> dict[BookingStatus, int]:
    """Per-status counts for one day. Statuses with no bookings are omitted."""
    counts: dict[BookingStatus, int] = {}
    for booking in bookings:
        counts[booking.status] = counts.get(booking.status, 0) + 1
    return counts


def bookings_for_date(view: Mapping[str, list[Booking]], target: date) -> list[Booking]:
    """The bucket for a date, or an empty list."""
    return list(view.get(to_key(target), []))


def sort_by_time(bookings: Iterable[Booking]) -> list[Booking]:
    """Order bookings by their time label for presentation."""
    return sorted(bookings, key=lambda b: b.time)


class BookingBook:
    """
    Owner of the manual booking map.

    Every mutation rewrites the whole map through the storage port, if one is
    given. Reads return copies.
    """

    def __init__(self, storage: "BookingStorage | None" = None):
        self._storage = storage
        self._buckets: dict[str, list[Booking]] = {}
        if storage is not None:
            for key, bookings in storage.load_bookings().items():
                self._buckets[key] = list(bookings)

    def snapshot(self) -> BookingView:
        """Copy of the manual map, safe to mutate."""
        return {key: list(bookings) for key, bookings in self._buckets.items()}

    def add(
        self,
        target: date,
        title: str,
        time: str = ALL_DAY,
        status: BookingStatus = BookingStatus.PENDING,
    ) -> Booking:
        """Store a new manual booking under the target date's key."""
        booking = Booking(
            id=f"booking-{uuid.uuid4().hex}",
            title=title,
            status=status,
            time=time,
        )
        key = to_key(target)
        self._buckets.setdefault(key, []).append(booking)
        logger.debug(f"Added booking {booking.id} on {key}")
        self._save()
        return booking

    def update_status(self, booking_id: str, status: BookingStatus) -> Booking:
        """
        Change the status of the first manual booking with this id.

        Raises VirtualBookingError for task-derived ids, NotFound otherwise.
        """
        for key, bookings in self._buckets.items():
            for i, booking in enumerate(bookings):
                if booking.id != booking_id:
                    continue
                if booking.task_id is not None:
                    raise VirtualBookingError(
                        f"Booking {booking_id} is tagged to task {booking.task_id}; update the task instead"
                    )
                updated = replace(booking, status=status)
                bookings[i] = updated
                logger.debug(f"Booking {booking_id} on {key} set to {status.value}")
                self._save()
                return updated

        if booking_id.startswith(VIRTUAL_PREFIX):
            raise VirtualBookingError(
                f"Booking {booking_id} is derived from a task; change the task status instead"
            )
        raise NotFound(f"Booking {booking_id} not found")

    def delete(self, booking_id: str) -> None:
        """Remove a manual booking. Raises NotFound."""
        for key, bookings in self._buckets.items():
            remaining = [b for b in bookings if b.id != booking_id]
            if len(remaining) != len(bookings):
                if remaining:
                    self._buckets[key] = remaining
                else:
                    del self._buckets[key]
                self._save()
                return
        raise NotFound(f"Booking {booking_id} not found")

    def _save(self) -> None:
        if self._storage is not None:
            self._storage.save_bookings(self.snapshot())


def parse_booking_map(data: object) -> BookingView:
    """Parse a decoded JSON object of date key -> booking records. Raises ParseFailure."""
    if not isinstance(data, dict):
        raise ParseFailure(f"Expected a booking map, got {type(data).__name__}")
    view: BookingView = {}
    for key, records in data.items():
        try:
            from_key(key)
        except InvalidKey as e:
            raise ParseFailure(str(e)) from e
        if not isinstance(records, list):
            raise ParseFailure(f"Bookings for {key} must be an array")
        view[key] = [Booking.from_dict(r) for r in records]
    return view
