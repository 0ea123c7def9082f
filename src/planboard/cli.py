"""Planboard CLI - Kanban board and booking calendar."""

import json
import logging
import sys
from datetime import date
from pathlib import Path

import click

from .config import load_config
from .core.bookings import BookingStatus, bookings_for_date, sort_by_time, statistics, status_counts
from .core.datekey import from_key, to_key
from .core.errors import InvalidKey, PlanboardError
from .core.filters import ALL, DueWindow, FilterCriteria, classify_due, filter_tasks
from .core.grid import CalendarDay, reset_anchor, shift_month, shift_week
from .core.tasks import Task, TaskPriority, TaskStatus
from .workflows import (
    current_view,
    get_auth,
    get_booking_book,
    get_task_store,
    get_transfer,
    import_file,
    month_calendar,
    week_calendar,
)

WEEKDAY_HEADER = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

STATUS_CHOICES = [s.value for s in TaskStatus]
PRIORITY_CHOICES = [p.value for p in TaskPriority]
BOOKING_STATUS_CHOICES = [s.value for s in BookingStatus]
DUE_CHOICES = [w.value for w in DueWindow]


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _parse_date(value: str | None) -> date | None:
    """Parse an optional YYYY-MM-DD argument (or 'today')."""
    if not value:
        return None
    if value == "today":
        return date.today()
    return from_key(value)


def _require_date(value: str | None) -> date:
    """Parse a mandatory date argument. Raises InvalidKey when it is empty."""
    parsed = _parse_date(value)
    if parsed is None:
        raise InvalidKey("A date is required (YYYY-MM-DD or 'today')")
    return parsed


def _task_line(task: Task, today: date) -> str:
    due = ""
    if task.due_date:
        window = classify_due(task, today)
        label = f", {window.value}" if window else ""
        due = f" (due {to_key(task.due_date)}{label})"
    return f"[{task.status.value:5}] [{task.priority.value:6}] {task.title}{due}  {task.id}"


def _task_json(tasks: list[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks], indent=2)


@click.group()
@click.version_option(package_name="planboard")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Planboard - Kanban tasks and booking calendar."""
    config = load_config()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else getattr(logging, config.log_level),
    )


# ============== Tasks ==============


@main.command()
@click.argument("title")
@click.option("--description", "-d", default=None, help="Longer description")
@click.option("--due", "due", default=None, help="Due date (YYYY-MM-DD or 'today')")
def add(title: str, description: str | None, due: str | None):
    """Add a task to the todo column."""
    try:
        store = get_task_store(load_config())
        task = store.add(title, description=description, due_date=_parse_date(due))
    except PlanboardError as e:
        _fail(e)
    click.echo(f"Added {task.id}: {task.title}")


@main.command("list")
@click.option("--search", "-s", default="", help="Match title or description")
@click.option("--status", type=click.Choice([ALL] + STATUS_CHOICES), default=ALL)
@click.option("--priority", type=click.Choice([ALL] + PRIORITY_CHOICES), default=ALL)
@click.option("--due", type=click.Choice(DUE_CHOICES), default=ALL, help="Relative due window")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(search: str, status: str, priority: str, due: str, as_json: bool):
    """List tasks, optionally filtered."""
    store = get_task_store(load_config())
    criteria = FilterCriteria(search_term=search, status=status, priority=priority, due=due)
    today = date.today()
    tasks = filter_tasks(store.list(), criteria, today)

    if as_json:
        click.echo(_task_json(tasks))
        return

    if not tasks:
        click.echo("No matching tasks.")
        return

    for column in TaskStatus:
        in_column = [t for t in tasks if t.status == column]
        if not in_column:
            continue
        click.echo(f"### {column.value.upper()}")
        for task in in_column:
            click.echo(f"  {_task_line(task, today)}")


@main.command()
@click.argument("task_id")
@click.option("--title", default=None)
@click.option("--description", "-d", default=None)
@click.option("--priority", type=click.Choice(PRIORITY_CHOICES), default=None)
@click.option("--due", default=None, help="Due date (YYYY-MM-DD or 'today')")
@click.option("--clear-due", is_flag=True, help="Remove the due date")
def edit(
    task_id: str,
    title: str | None,
    description: str | None,
    priority: str | None,
    due: str | None,
    clear_due: bool,
):
    """Edit a task's fields."""
    patch = {}
    if title is not None:
        patch["title"] = title
    if description is not None:
        patch["description"] = description
    if priority is not None:
        patch["priority"] = TaskPriority(priority)
    try:
        if clear_due:
            patch["due_date"] = None
        elif due is not None:
            patch["due_date"] = _parse_date(due)

        if not patch:
            click.echo("Nothing to change.")
            return

        task = get_task_store(load_config()).update(task_id, **patch)
    except PlanboardError as e:
        _fail(e)
    click.echo(f"Updated {task.id}: {task.title}")


@main.command()
@click.argument("task_id")
@click.argument("status", type=click.Choice(STATUS_CHOICES))
def move(task_id: str, status: str):
    """Move a task to another column."""
    try:
        task = get_task_store(load_config()).move(task_id, TaskStatus(status))
    except PlanboardError as e:
        _fail(e)
    click.echo(f'Moved "{task.title}" to {status}.')


@main.command()
@click.argument("task_id")
def delete(task_id: str):
    """Delete a task."""
    try:
        get_task_store(load_config()).delete(task_id)
    except PlanboardError as e:
        _fail(e)
    click.echo(f"Deleted {task_id}.")


# ============== Bookings ==============


@main.command()
@click.argument("target_date")
@click.argument("title")
@click.option("--time", "-t", "time_label", default=None, help="Time label, e.g. 09:30")
def book(target_date: str, title: str, time_label: str | None):
    """Add a manual booking on a date."""
    config = load_config()
    try:
        booking = get_booking_book(config).add(
            _require_date(target_date),
            title,
            time=time_label or config.all_day_label,
        )
    except PlanboardError as e:
        _fail(e)
    click.echo(f"Booked {booking.id} on {target_date}: {booking.title}")


@main.command("booking-status")
@click.argument("booking_id")
@click.argument("status", type=click.Choice(BOOKING_STATUS_CHOICES))
def booking_status(booking_id: str, status: str):
    """Approve, reject or reset a manual booking."""
    try:
        booking = get_booking_book(load_config()).update_status(booking_id, BookingStatus(status))
    except PlanboardError as e:
        _fail(e)
    click.echo(f'Booking "{booking.title}" is now {status}.')


@main.command()
@click.argument("target_date", default="today")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def day(target_date: str, as_json: bool):
    """Show bookings for a single day, ordered by time."""
    config = load_config()
    try:
        target = _require_date(target_date)
    except PlanboardError as e:
        _fail(e)

    view = current_view(get_task_store(config), get_booking_book(config), config)
    bookings = sort_by_time(bookings_for_date(view, target))

    if as_json:
        click.echo(json.dumps([b.to_dict() for b in bookings], indent=2))
        return

    click.echo(f"### {target.strftime('%A, %B %d')}")
    if not bookings:
        click.echo("  No bookings.")
        return
    for booking in bookings:
        source = " (task)" if booking.is_virtual else ""
        click.echo(f"  {booking.time:8} [{booking.status.value:8}] {booking.title}{source}  {booking.id}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(as_json: bool):
    """Booking counts by status."""
    config = load_config()
    view = current_view(get_task_store(config), get_booking_book(config), config)
    result = statistics(view)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "total": result.total,
                    "pending": result.pending,
                    "approved": result.approved,
                    "rejected": result.rejected,
                },
                indent=2,
            )
        )
        return

    click.echo(f"Total:    {result.total}")
    click.echo(f"Pending:  {result.pending}")
    click.echo(f"Approved: {result.approved}")
    click.echo(f"Rejected: {result.rejected}")


# ============== Calendar ==============


@main.group(invoke_without_command=True)
@click.pass_context
def calendar(ctx):
    """Show the booking calendar."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(calendar_month)


def _anchor(target_date: str | None, offset: int, shift) -> date:
    anchor = _parse_date(target_date) or reset_anchor()
    return shift(anchor, offset) if offset else anchor


def _days_json(days: list[CalendarDay]) -> str:
    return json.dumps(
        [
            {
                "date": to_key(d.date),
                "isCurrentMonth": d.is_current_month,
                "isToday": d.is_today,
                "bookings": [b.to_dict() for b in d.bookings],
            }
            for d in days
        ],
        indent=2,
    )


def _cell(d: CalendarDay) -> str:
    number = f"{d.date.day:>2}" if d.is_current_month else " ."
    marker = "*" if d.is_today else " "
    count = f"[{len(d.bookings)}]" if d.bookings else ""
    return f"{number}{marker}{count:<4}"


@calendar.command("month")
@click.option("--date", "-d", "target_date", default=None, help="Any day in the month (YYYY-MM-DD)")
@click.option("--offset", "-o", default=0, help="Months to move from the anchor, e.g. -1")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def calendar_month(target_date: str | None = None, offset: int = 0, as_json: bool = False):
    """Six-week month grid."""
    try:
        anchor = _anchor(target_date, offset, shift_month)
    except PlanboardError as e:
        _fail(e)
    days = month_calendar(load_config(), anchor)

    if as_json:
        click.echo(_days_json(days))
        return

    click.echo(anchor.strftime("%B %Y"))
    click.echo(" ".join(f"{name:<7}" for name in WEEKDAY_HEADER).rstrip())
    for row in range(0, len(days), 7):
        click.echo(" ".join(_cell(d) for d in days[row : row + 7]).rstrip())


@calendar.command("week")
@click.option("--date", "-d", "target_date", default=None, help="Any day in the week (YYYY-MM-DD)")
@click.option("--offset", "-o", default=0, help="Weeks to move from the anchor, e.g. 1")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def calendar_week(target_date: str | None = None, offset: int = 0, as_json: bool = False):
    """Sunday-to-Saturday week with bookings."""
    try:
        anchor = _anchor(target_date, offset, shift_week)
    except PlanboardError as e:
        _fail(e)
    days = week_calendar(load_config(), anchor)

    if as_json:
        click.echo(_days_json(days))
        return

    for d in days:
        marker = " (today)" if d.is_today else ""
        counts = status_counts(d.bookings)
        summary = ", ".join(f"{n} {s.value}" for s, n in counts.items())
        click.echo(f"### {d.date.strftime('%a %d %b')}{marker}" + (f"  [{summary}]" if summary else ""))
        for booking in sort_by_time(d.bookings):
            click.echo(f"  {booking.time:8} {booking.title}")


# ============== Import / Export ==============


@main.command("export")
@click.option("--dir", "directory", type=click.Path(file_okay=False, path_type=Path), default=None)
def export_cmd(directory: Path | None):
    """Write all tasks to tasks-data.json."""
    config = load_config()
    store = get_task_store(config)
    path = get_transfer(config).export_tasks(store.list(), directory)
    click.echo(f"✓ Exported {len(store.list())} tasks to {path}")


@main.command("import")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
def import_cmd(path: Path):
    """Replace all tasks with those in a JSON export."""
    config = load_config()
    count = import_file(get_task_store(config), get_transfer(config), path, config)
    if not count:
        click.echo("No tasks imported.")
        return
    click.echo(f"✓ Imported {count} tasks")


# ============== Session ==============


@main.command()
@click.argument("email")
@click.password_option(confirmation_prompt=False)
def login(email: str, password: str):
    """Sign in locally."""
    if not get_auth(load_config()).login(email, password):
        click.echo("Error: invalid credentials", err=True)
        sys.exit(1)
    click.echo(f"Signed in as {email}")


@main.command()
def logout():
    """Sign out."""
    get_auth(load_config()).logout()
    click.echo("Signed out.")


@main.command()
def whoami():
    """Show the signed-in user."""
    user = get_auth(load_config()).current_user()
    if user is None:
        click.echo("Not signed in.")
        return
    click.echo(f"{user.name} <{user.email}>")


if __name__ == "__main__":
    main()
