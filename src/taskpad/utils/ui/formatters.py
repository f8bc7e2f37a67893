"""Output formatters for the Taskpad CLI."""

import json
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table

from taskpad.models import Task, TaskCounts, TaskStatus

STATUS_STYLES = {
    TaskStatus.PENDING: "yellow",
    TaskStatus.IN_PROGRESS: "cyan",
    TaskStatus.COMPLETED: "green",
}


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    """Shared Rich console."""
    return Console(highlight=highlight)


def format_output(data: Any, output_format: str = "table") -> None:
    """Print tasks (or any JSON-able data) in the requested format."""
    if output_format == "json":
        print(json.dumps(_plain(data), indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.safe_dump(_plain(data), default_flow_style=False, sort_keys=False))
    elif isinstance(data, list) and all(isinstance(item, Task) for item in data):
        format_tasks_table(data)
    elif isinstance(data, Task):
        format_task_detail(data)
    elif isinstance(data, TaskCounts):
        format_counts(data)
    else:
        get_console().print(data)


def _plain(data: Any) -> Any:
    if isinstance(data, list):
        return [_plain(item) for item in data]
    if isinstance(data, Task):
        return data.to_api()
    if isinstance(data, TaskCounts):
        return data.model_dump(by_alias=True)
    return data


def format_tasks_table(tasks: list[Task]) -> None:
    """Render tasks as a table."""
    console = get_console()
    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Status")
    table.add_column("Due")
    table.add_column("Image", justify="center")

    for task in tasks:
        due = format_due_date(task.due_date)
        if is_overdue(task):
            due = f"[red]{due}[/red]"
        table.add_row(
            str(task.id),
            task.title,
            format_status(task.status),
            due,
            "✓" if task.image else "",
        )

    console.print(table)


def format_task_detail(task: Task) -> None:
    """Render a single task as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("ID", str(task.id))
    table.add_row("Title", task.title)
    table.add_row("Description", task.description or "-")
    table.add_row("Status", format_status(task.status))
    table.add_row("Due", format_due_date(task.due_date))
    table.add_row("Image", f"{len(task.image)} bytes" if task.image else "-")
    table.add_row("Created", format_relative_time(task.created_at))
    table.add_row("Updated", format_relative_time(task.updated_at))

    get_console().print(table)


def format_counts(counts: TaskCounts) -> None:
    """Render per-status counts."""
    console = get_console()
    console.print(f"[bold]Total:[/bold] {counts.total}")
    console.print(f"  [yellow]pending[/yellow]      {counts.pending}")
    console.print(f"  [cyan]in-progress[/cyan]  {counts.in_progress}")
    console.print(f"  [green]completed[/green]    {counts.completed}")


def format_status(status: TaskStatus) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status.value}[/{style}]"


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    get_console().print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    get_console().print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    get_console().print(f"[bold blue]Info:[/bold blue] {message}")


# ============================================================================
# Helper Functions
# ============================================================================


def _aware(date: datetime) -> datetime:
    return date if date.tzinfo is not None else date.replace(tzinfo=UTC)


def is_overdue(task: Task, now: datetime | None = None) -> bool:
    """Open task whose due date has passed."""
    if task.status == TaskStatus.COMPLETED:
        return False
    return _aware(task.due_date) < (now or datetime.now(UTC))


def format_due_date(date: datetime, now: datetime | None = None) -> str:
    """Compact due date: ``HH:MM DD/MM Day``, with the year when not current."""
    date = _aware(date)
    now = now or datetime.now(UTC)

    day_str = date.strftime("%d/%m")
    if date.year != now.year:
        day_str = date.strftime("%d/%m/%Y")
    return f"{date.strftime('%H:%M')} {day_str} {date.strftime('%a')}"


def format_relative_time(date: datetime, now: datetime | None = None) -> str:
    """Format a past timestamp as relative time."""
    seconds = ((now or datetime.now(UTC)) - _aware(date)).total_seconds()

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{int(seconds / 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds / 3600)}h ago"
    return f"{int(seconds / 86400)}d ago"
