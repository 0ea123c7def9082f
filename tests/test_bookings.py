"""Tests for booking aggregation."""

from collections import Counter
from datetime import date

import pytest

from planboard.core.bookings import (
    ALL_DAY,
    Booking,
    BookingBook,
    BookingStatus,
    Statistics,
    bookings_for_date,
    merge,
    parse_booking_map,
    sort_by_time,
    statistics,
    status_counts,
    virtual_booking,
)
from planboard.core.errors import NotFound, ParseFailure, VirtualBookingError
from planboard.core.tasks import TaskStatus

from fakes import InMemoryBookingStorage


def manual(booking_id: str, time: str = "10:00", status=BookingStatus.PENDING, task_id=None) -> Booking:
    return Booking(id=booking_id, title=f"Booking {booking_id}", status=status, time=time, task_id=task_id)


class TestVirtualBooking:
    @pytest.mark.parametrize(
        "task_status,expected",
        [
            (TaskStatus.TODO, BookingStatus.PENDING),
            (TaskStatus.DOING, BookingStatus.PENDING),
            (TaskStatus.DONE, BookingStatus.APPROVED),
        ],
    )
    def test_status_projection(self, make_task, task_status, expected):
        task = make_task("1", status=task_status, due_date=date(2024, 3, 15))
        assert virtual_booking(task).status == expected

    def test_id_and_task_link(self, make_task):
        booking = virtual_booking(make_task("abc", title="Write", due_date=date(2024, 3, 15)))
        assert booking.id == "task-abc"
        assert booking.task_id == "abc"
        assert booking.title == "Write"
        assert booking.time == ALL_DAY
        assert booking.is_virtual


class TestMerge:
    def test_done_task_example(self, make_task):
        tasks = [make_task("1", due_date=date(2024, 3, 15), status=TaskStatus.DONE)]
        view = merge(tasks, {})
        assert list(view) == ["2024-03-15"]
        [booking] = view["2024-03-15"]
        assert booking.id == "task-1"
        assert booking.status == BookingStatus.APPROVED
        assert booking.task_id == "1"
        assert statistics(view) == Statistics(total=1, pending=0, approved=1, rejected=0)

    def test_tasks_without_due_date_are_skipped(self, make_task):
        assert merge([make_task("1")], {}) == {}

    def test_virtual_first_then_manual(self, make_task):
        tasks = [make_task("1", due_date=date(2024, 3, 15))]
        view = merge(tasks, {"2024-03-15": [manual("b1", time="08:00")]})
        assert [b.id for b in view["2024-03-15"]] == ["task-1", "b1"]

    def test_manual_only_bucket_is_created(self):
        view = merge([], {"2024-03-16": [manual("b1")]})
        assert [b.id for b in view["2024-03-16"]] == ["b1"]

    def test_manual_entries_tagged_to_task_are_dropped(self, make_task):
        tasks = [make_task("1", due_date=date(2024, 3, 15))]
        tagged = manual("task-1", task_id="1")
        view = merge(tasks, {"2024-03-15": [tagged, manual("b1")]})
        assert [b.id for b in view["2024-03-15"]] == ["task-1", "b1"]

    def test_every_due_task_has_a_booking_in_its_bucket(self, make_task):
        tasks = [
            make_task("1", due_date=date(2024, 3, 15), status=TaskStatus.DONE),
            make_task("2", due_date=date(2024, 3, 15), status=TaskStatus.DOING),
            make_task("3", due_date=date(2024, 4, 1)),
        ]
        view = merge(tasks, {})
        for task in tasks:
            matches = [b for b in view[task.due_key] if b.task_id == task.id]
            assert len(matches) == 1
            expected = BookingStatus.APPROVED if task.status == TaskStatus.DONE else BookingStatus.PENDING
            assert matches[0].status == expected

    def test_idempotent(self, make_task):
        tasks = [make_task("1", due_date=date(2024, 3, 15)), make_task("2", due_date=date(2024, 3, 16))]
        bookings = {"2024-03-15": [manual("b1")]}
        first = merge(tasks, bookings)
        second = merge(tasks, bookings)
        assert first.keys() == second.keys()
        for key in first:
            assert Counter(b.id for b in first[key]) == Counter(b.id for b in second[key])

    def test_does_not_mutate_manual_map(self, make_task):
        bookings = {"2024-03-15": [manual("b1")]}
        view = merge([make_task("1", due_date=date(2024, 3, 15))], bookings)
        view["2024-03-15"].clear()
        assert [b.id for b in bookings["2024-03-15"]] == ["b1"]

    def test_custom_time_label(self, make_task):
        view = merge([make_task("1", due_date=date(2024, 3, 15))], {}, time_label="Todo o dia")
        assert view["2024-03-15"][0].time == "Todo o dia"

    def test_reflects_task_changes_on_every_call(self, make_task):
        task = make_task("1", due_date=date(2024, 3, 15))
        assert merge([task], {})["2024-03-15"][0].status == BookingStatus.PENDING
        done = make_task("1", due_date=date(2024, 3, 15), status=TaskStatus.DONE)
        assert merge([done], {})["2024-03-15"][0].status == BookingStatus.APPROVED


class TestStatistics:
    def test_empty(self):
        assert statistics({}) == Statistics()

    def test_counts_by_status(self, make_task):
        tasks = [
            make_task("1", due_date=date(2024, 3, 15), status=TaskStatus.DONE),
            make_task("2", due_date=date(2024, 3, 16)),
        ]
        bookings = {
            "2024-03-15": [manual("b1", status=BookingStatus.REJECTED)],
            "2024-03-20": [manual("b2"), manual("b3", status=BookingStatus.APPROVED)],
        }
        view = merge(tasks, bookings)
        result = statistics(view)
        assert result == Statistics(total=5, pending=2, approved=2, rejected=1)
        assert result.total == sum(len(b) for b in view.values())


class TestDayHelpers:
    def test_bookings_for_date(self):
        view = {"2024-03-15": [manual("b1")]}
        assert [b.id for b in bookings_for_date(view, date(2024, 3, 15))] == ["b1"]
        assert bookings_for_date(view, date(2024, 3, 16)) == []

    def test_sort_by_time_is_lexicographic(self):
        bookings = [manual("a", time="14:00"), manual("b", time="09:30"), manual("c", time="all-day")]
        assert [b.id for b in sort_by_time(bookings)] == ["b", "a", "c"]

    def test_status_counts(self):
        bookings = [manual("a"), manual("b"), manual("c", status=BookingStatus.REJECTED)]
        assert status_counts(bookings) == {BookingStatus.PENDING: 2, BookingStatus.REJECTED: 1}


class TestBookingBook:
    @pytest.fixture
    def storage(self):
        return InMemoryBookingStorage()

    @pytest.fixture
    def book(self, storage):
        return BookingBook(storage)

    def test_add_stores_under_date_key(self, book, storage):
        booking = book.add(date(2024, 3, 15), "Dentist", time="09:30")
        assert booking.id.startswith("booking-")
        assert booking.status == BookingStatus.PENDING
        assert book.snapshot() == {"2024-03-15": [booking]}
        assert storage.bookings == {"2024-03-15": [booking]}

    def test_add_generates_unique_ids(self, book):
        ids = {book.add(date(2024, 3, 15), "x").id for _ in range(20)}
        assert len(ids) == 20

    def test_update_status(self, book, storage):
        booking = book.add(date(2024, 3, 15), "Dentist")
        updated = book.update_status(booking.id, BookingStatus.APPROVED)
        assert updated.status == BookingStatus.APPROVED
        assert book.snapshot()["2024-03-15"][0].status == BookingStatus.APPROVED
        assert len(storage.saves) == 2

    def test_update_status_missing(self, book):
        with pytest.raises(NotFound):
            book.update_status("booking-missing", BookingStatus.APPROVED)

    def test_update_status_rejects_virtual_ids(self, book):
        with pytest.raises(VirtualBookingError):
            book.update_status("task-1", BookingStatus.APPROVED)

    def test_update_status_rejects_stored_tagged_entry(self):
        book = BookingBook(InMemoryBookingStorage({"2024-03-15": [manual("x", task_id="1")]}))
        with pytest.raises(VirtualBookingError):
            book.update_status("x", BookingStatus.APPROVED)

    def test_delete(self, book):
        booking = book.add(date(2024, 3, 15), "Dentist")
        book.delete(booking.id)
        assert book.snapshot() == {}
        with pytest.raises(NotFound):
            book.delete(booking.id)

    def test_snapshot_is_a_copy(self, book):
        book.add(date(2024, 3, 15), "Dentist")
        snapshot = book.snapshot()
        snapshot["2024-03-15"].clear()
        assert len(book.snapshot()["2024-03-15"]) == 1

    def test_loads_from_storage(self):
        storage = InMemoryBookingStorage({"2024-03-15": [manual("b1")]})
        assert [b.id for b in BookingBook(storage).snapshot()["2024-03-15"]] == ["b1"]


class TestBookingWireFormat:
    def test_round_trip_keeps_task_link(self):
        booking = manual("b1", task_id="7")
        assert Booking.from_dict(booking.to_dict()) == booking

    def test_parse_booking_map(self):
        view = parse_booking_map({"2024-03-15": [{"id": "b1", "title": "T", "status": "rejected", "time": "10:00"}]})
        assert view["2024-03-15"][0].status == BookingStatus.REJECTED

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"15-03-2024": []},
            {"2024-03-15": "nope"},
            {"2024-03-15": [{"title": "no id"}]},
            {"2024-03-15": [{"id": "b", "title": "T", "status": "maybe"}]},
        ],
    )
    def test_parse_booking_map_rejects_malformed(self, data):
        with pytest.raises(ParseFailure):
            parse_booking_map(data)
