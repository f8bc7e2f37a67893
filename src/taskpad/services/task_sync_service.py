"""Task sync service - mirrors server task state into a local cache.

Reads degrade gracefully: when the server cannot be reached, ``refresh``
serves the last successfully synced list from local storage and logs the
failure instead of raising. Writes are not queued offline; a failed create,
update or delete propagates to the caller and leaves local state untouched.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import httpx
from pydantic import TypeAdapter, ValidationError

from taskpad.models import Task, TaskCounts, TaskCreate, TaskStatus, TaskUpdate
from taskpad.services.api.tasks import TasksAPI
from taskpad.services.local_storage import TASKS_KEY, LocalStorage
from taskpad.utils.logger import get_logger
from taskpad.utils.observable import Observable

UPCOMING_WINDOW = timedelta(days=7)

_task_list = TypeAdapter(list[Task])


class TaskSyncService:
    """Client-side task collection backed by the API and a local mirror."""

    def __init__(self, api: TasksAPI, storage: LocalStorage):
        """Initialize the sync service.

        Args:
            api: Tasks endpoint wrapper
            storage: Local storage holding the task mirror
        """
        self.api = api
        self.storage = storage
        self.tasks: Observable[list[Task]] = Observable([])

    # ------------------------------------------------------------------
    # Mirror
    # ------------------------------------------------------------------

    def _publish(self, tasks: list[Task]) -> None:
        """Persist ``tasks`` as the mirror, then publish them."""
        self.storage.set(TASKS_KEY, [task.to_api() for task in tasks])
        self.tasks.next(tasks)

    def load_cached(self) -> list[Task]:
        """Tasks from the local mirror, or [] if it is missing or corrupt."""
        cached = self.storage.get(TASKS_KEY) or []
        try:
            return _task_list.validate_python(cached)
        except ValidationError:
            get_logger().warning("discarding malformed task mirror")
            return []

    async def refresh(self) -> list[Task]:
        """Pull the server's task list, falling back to the local mirror.

        Never raises for network or server failures.
        """
        try:
            tasks = _task_list.validate_python(await self.api.list_tasks())
        except (httpx.HTTPError, ValueError) as e:
            get_logger().warning(
                "failed to load tasks from server, using local storage: %s", e
            )
            self.tasks.next(self.load_cached())
            return self.tasks.value

        self._publish(tasks)
        return tasks

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_task(self, data: TaskCreate) -> Task:
        """Create a task on the server and append it locally."""
        try:
            task = Task.model_validate(await self.api.create_task(data.to_api()))
        except Exception as e:
            get_logger().error("failed to create task: %s", e)
            raise
        self._publish([*self.tasks.value, task])
        return task

    async def update_task(self, task_id: int, updates: TaskUpdate) -> Task:
        """Send a partial update and replace the local copy with the result."""
        try:
            task = Task.model_validate(await self.api.update_task(task_id, updates.to_api()))
        except Exception as e:
            get_logger().error("failed to update task %s: %s", task_id, e)
            raise
        self._publish([task if t.id == task_id else t for t in self.tasks.value])
        return task

    async def delete_task(self, task_id: int) -> None:
        """Delete a task on the server and drop it locally."""
        try:
            await self.api.delete_task(task_id)
        except Exception as e:
            get_logger().error("failed to delete task %s: %s", task_id, e)
            raise
        self._publish([t for t in self.tasks.value if t.id != task_id])

    async def get_task(self, task_id: int) -> Task | None:
        """Fetch one task, falling back to the in-memory copy on failure."""
        try:
            return Task.model_validate(await self.api.get_task(task_id))
        except (httpx.HTTPError, ValueError) as e:
            get_logger().warning("failed to get task %s, using local copy: %s", task_id, e)
            return next((t for t in self.tasks.value if t.id == task_id), None)

    # ------------------------------------------------------------------
    # Derived views (pure, no I/O)
    # ------------------------------------------------------------------

    def by_status(self, status: TaskStatus) -> list[Task]:
        return tasks_by_status(self.tasks.value, status)

    def search(self, query: str) -> list[Task]:
        return search_tasks(self.tasks.value, query)

    def upcoming(self, now: datetime | None = None) -> list[Task]:
        return upcoming_tasks(self.tasks.value, now)

    def overdue(self, now: datetime | None = None) -> list[Task]:
        return overdue_tasks(self.tasks.value, now)

    def counts(self) -> TaskCounts:
        return count_tasks(self.tasks.value)

    def watch_counts(self) -> Observable[TaskCounts]:
        """Counts that recompute whenever the task list is republished."""
        return self.tasks.map(count_tasks)

    def watch_status(self, status: TaskStatus) -> Observable[list[Task]]:
        """Tasks in ``status``, recomputed on every change."""
        return self.tasks.map(lambda tasks: tasks_by_status(tasks, status))

    def watch_search(self, query: str) -> Observable[list[Task]]:
        """Tasks matching ``query``, recomputed on every change."""
        return self.tasks.map(lambda tasks: search_tasks(tasks, query))

    def watch_upcoming(self, now: datetime | None = None) -> Observable[list[Task]]:
        """Upcoming tasks; without ``now`` the clock is read on every change."""
        return self.tasks.map(lambda tasks: upcoming_tasks(tasks, now))

    def watch_overdue(self, now: datetime | None = None) -> Observable[list[Task]]:
        """Overdue tasks; without ``now`` the clock is read on every change."""
        return self.tasks.map(lambda tasks: overdue_tasks(tasks, now))


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def tasks_by_status(tasks: list[Task], status: TaskStatus) -> list[Task]:
    """Tasks currently in ``status``."""
    return [t for t in tasks if t.status == status]


def search_tasks(tasks: list[Task], query: str) -> list[Task]:
    """Case-insensitive substring match on title or description."""
    needle = query.lower()
    return [
        t for t in tasks if needle in t.title.lower() or needle in t.description.lower()
    ]


def upcoming_tasks(tasks: list[Task], now: datetime | None = None) -> list[Task]:
    """Open tasks due within the next seven days."""
    now = _aware(now or datetime.now(UTC))
    horizon = now + UPCOMING_WINDOW
    return [
        t
        for t in tasks
        if t.status != TaskStatus.COMPLETED and now <= _aware(t.due_date) <= horizon
    ]


def overdue_tasks(tasks: list[Task], now: datetime | None = None) -> list[Task]:
    """Open tasks whose due date has passed."""
    now = _aware(now or datetime.now(UTC))
    return [
        t for t in tasks if t.status != TaskStatus.COMPLETED and _aware(t.due_date) < now
    ]


def count_tasks(tasks: list[Task]) -> TaskCounts:
    """Totals per status."""
    return TaskCounts(
        total=len(tasks),
        pending=sum(1 for t in tasks if t.status == TaskStatus.PENDING),
        in_progress=sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
        completed=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
    )
