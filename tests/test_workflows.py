"""Tests for the shared workflow layer."""

from datetime import date

import pytest

from planboard.config import Config
from planboard.core.bookings import BookingStatus
from planboard.core.tasks import TaskStatus
from planboard.workflows import (
    current_view,
    get_auth,
    get_booking_book,
    get_task_store,
    get_transfer,
    import_file,
    month_calendar,
    week_calendar,
)


@pytest.fixture
def config(tmp_path):
    return Config(data_dir=str(tmp_path / "data"), export_dir=str(tmp_path / "out"))


class TestAdapterResolution:
    def test_stores_share_data_dir(self, config, tmp_path):
        get_task_store(config).add("A")
        get_booking_book(config).add(date(2024, 3, 15), "B")
        assert (tmp_path / "data" / "kanban-tasks.json").exists()
        assert (tmp_path / "data" / "bookings.json").exists()

    def test_transfer_uses_export_dir(self, config, tmp_path):
        assert get_transfer(config).export_dir == tmp_path / "out"

    def test_auth_uses_data_dir(self, config, tmp_path):
        assert get_auth(config).path.parent == tmp_path / "data"


class TestCurrentView:
    def test_merges_tasks_and_bookings(self, config):
        store = get_task_store(config)
        book = get_booking_book(config)
        task = store.add("Ship", due_date=date(2024, 3, 15))
        store.move(task.id, TaskStatus.DONE)
        booking = book.add(date(2024, 3, 15), "Dentist", time="09:30")

        view = current_view(store, book, config)
        assert [b.id for b in view["2024-03-15"]] == [f"task-{task.id}", booking.id]
        assert view["2024-03-15"][0].status == BookingStatus.APPROVED

    def test_uses_configured_all_day_label(self, tmp_path):
        config = Config(data_dir=str(tmp_path), all_day_label="Todo o dia")
        store = get_task_store(config)
        store.add("Ship", due_date=date(2024, 3, 15))
        view = current_view(store, get_booking_book(config), config)
        assert view["2024-03-15"][0].time == "Todo o dia"

    def test_calendars_read_persisted_state(self, config):
        get_task_store(config).add("Ship", due_date=date(2024, 3, 15))
        month = month_calendar(config, date(2024, 3, 1))
        week = week_calendar(config, date(2024, 3, 15))
        assert len(month) == 42
        assert len(week) == 7
        assert sum(len(d.bookings) for d in month) == 1
        assert sum(len(d.bookings) for d in week) == 1


class TestImportFile:
    def test_replaces_store_contents(self, config):
        source = get_task_store(Config(data_dir=config.data_dir + "-src"))
        source.add("Imported A")
        source.add("Imported B")
        path = get_transfer(config).export_tasks(source.list())

        store = get_task_store(config)
        store.add("Existing")
        assert import_file(store, get_transfer(config), path, config) == 2
        assert [t.title for t in get_task_store(config).list()] == ["Imported A", "Imported B"]

    def test_failed_import_keeps_existing(self, config, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("not json")
        store = get_task_store(config)
        store.add("Existing")
        assert import_file(store, get_transfer(config), bad, config) == 0
        assert [t.title for t in store.list()] == ["Existing"]

    def test_empty_array_keeps_existing(self, config, tmp_path):
        empty = tmp_path / "empty.json"
        empty.write_text("[]")
        store = get_task_store(config)
        store.add("Existing")
        assert import_file(store, get_transfer(config), empty, config) == 0
        assert len(store.list()) == 1
