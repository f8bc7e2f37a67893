"""Task management commands."""

import base64
import mimetypes
from datetime import datetime
from pathlib import Path

import typer

from taskpad.commands.decorators import AppError, command_wrapper
from taskpad.commands.utils import client_services
from taskpad.models import TaskCreate, TaskStatus, TaskUpdate
from taskpad.services.config_service import get_config_service
from taskpad.services.task_sync_service import search_tasks, tasks_by_status
from taskpad.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from taskpad.utils.typer_helpers import SuggestingGroup
from taskpad.utils.ui.formatters import format_output, format_success, format_warning

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")


def _output_format(output: str | None) -> str:
    return output or get_config_service().config.output.format


def parse_due_date(value: str) -> datetime:
    """Parse an ISO date or datetime given on the command line."""
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise AppError(f"Invalid due date '{value}', expected ISO format", ERROR_INVALID_ARGS) from e


def encode_image(path: Path) -> str:
    """Read an image file into a base64 data URI."""
    if not path.is_file():
        raise AppError(f"Image not found: {path}", ERROR_INVALID_ARGS)
    mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    data = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{data}"


@app.command("list")
@command_wrapper
async def list_tasks(
    status: TaskStatus | None = typer.Option(None, "--status", help="Filter by status"),
    search: str | None = typer.Option(None, "--search", help="Search title and description"),
    output: str | None = typer.Option(None, "--output", "-o", help="table, json or yaml"),
) -> None:
    """List your tasks (served from the local cache when offline)."""
    async with client_services() as services:
        tasks = await services.tasks.refresh()
    if status is not None:
        tasks = tasks_by_status(tasks, status)
    if search:
        tasks = search_tasks(tasks, search)
    format_output(tasks, _output_format(output))


@app.command("add")
@command_wrapper
async def add_task(
    title: str = typer.Argument(..., help="Task title"),
    description: str = typer.Option(..., "--description", "-d", help="Task description"),
    due: str = typer.Option(..., "--due", help="Due date (ISO format)"),
    status: TaskStatus = typer.Option(TaskStatus.PENDING, "--status", help="Initial status"),
    image: Path | None = typer.Option(None, "--image", help="Attach an image file"),
    output: str | None = typer.Option(None, "--output", "-o", help="table, json or yaml"),
) -> None:
    """Create a task."""
    if not title.strip() or not description.strip():
        raise AppError("Title and description must not be empty", ERROR_INVALID_ARGS)
    data = TaskCreate(
        title=title,
        description=description,
        due_date=parse_due_date(due),
        status=status,
        image=encode_image(image) if image else None,
    )
    async with client_services() as services:
        task = await services.tasks.create_task(data)
    format_success(f"Created task {task.id}")
    format_output(task, _output_format(output))


@app.command("show")
@command_wrapper
async def show_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    output: str | None = typer.Option(None, "--output", "-o", help="table, json or yaml"),
) -> None:
    """Show one task."""
    async with client_services() as services:
        await services.tasks.refresh()
        task = await services.tasks.get_task(task_id)
    if task is None:
        raise AppError(f"Task {task_id} not found", ERROR_NOT_FOUND)
    format_output(task, _output_format(output))


@app.command("update")
@command_wrapper
async def update_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    description: str | None = typer.Option(None, "--description", "-d", help="New description"),
    due: str | None = typer.Option(None, "--due", help="New due date (ISO format)"),
    status: TaskStatus | None = typer.Option(None, "--status", help="New status"),
    image: Path | None = typer.Option(None, "--image", help="Replace the image"),
    clear_image: bool = typer.Option(False, "--clear-image", help="Remove the image"),
    output: str | None = typer.Option(None, "--output", "-o", help="table, json or yaml"),
) -> None:
    """Update fields of a task; options left out keep their value."""
    if image and clear_image:
        raise AppError("--image and --clear-image are mutually exclusive", ERROR_INVALID_ARGS)

    changes: dict = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if due is not None:
        changes["due_date"] = parse_due_date(due)
    if status is not None:
        changes["status"] = status
    if image is not None:
        changes["image"] = encode_image(image)
    elif clear_image:
        changes["image"] = None

    if not changes:
        format_warning("Nothing to update")
        return

    async with client_services() as services:
        await services.tasks.refresh()
        task = await services.tasks.update_task(task_id, TaskUpdate(**changes))
    format_success(f"Updated task {task.id}")
    format_output(task, _output_format(output))


@app.command("delete")
@command_wrapper
async def delete_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    if not yes and not typer.confirm(f"Delete task {task_id}?"):
        raise typer.Exit(0)
    async with client_services() as services:
        await services.tasks.refresh()
        await services.tasks.delete_task(task_id)
    format_success(f"Deleted task {task_id}")


@app.command("upcoming")
@command_wrapper
async def upcoming(
    output: str | None = typer.Option(None, "--output", "-o", help="table, json or yaml"),
) -> None:
    """Open tasks due in the next seven days."""
    async with client_services() as services:
        await services.tasks.refresh()
        tasks = services.tasks.upcoming()
    format_output(tasks, _output_format(output))


@app.command("overdue")
@command_wrapper
async def overdue(
    output: str | None = typer.Option(None, "--output", "-o", help="table, json or yaml"),
) -> None:
    """Open tasks past their due date."""
    async with client_services() as services:
        await services.tasks.refresh()
        tasks = services.tasks.overdue()
    format_output(tasks, _output_format(output))


@app.command("stats")
@command_wrapper
async def stats(
    output: str | None = typer.Option(None, "--output", "-o", help="table, json or yaml"),
) -> None:
    """Task counts per status."""
    async with client_services() as services:
        await services.tasks.refresh()
        counts = services.tasks.counts()
    format_output(counts, _output_format(output))
