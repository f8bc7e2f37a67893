"""Owner-scoped in-memory task storage."""

from __future__ import annotations

import itertools
from datetime import UTC, datetime, timedelta

from taskpad.models import Task, TaskCreate, TaskUpdate
from taskpad.server.exceptions import TaskNotFoundError

_TICK = timedelta(microseconds=1)


class TaskStore:
    """Holds every user's tasks, keyed by task id in insertion order.

    All reads and writes take the caller's owner id; a task owned by someone
    else is reported exactly like a missing one.
    """

    def __init__(self) -> None:
        self._tasks: dict[int, Task] = {}
        self._ids = itertools.count(1)

    def list(self, owner_id: int) -> list[Task]:
        """All tasks of ``owner_id`` in creation order."""
        return [task for task in self._tasks.values() if task.user_id == owner_id]

    def create(self, owner_id: int, data: TaskCreate) -> Task:
        """Store a new task for ``owner_id`` and return it."""
        now = datetime.now(UTC)
        task = Task(
            id=next(self._ids),
            user_id=owner_id,
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            status=data.status,
            image=data.image,
            created_at=now,
            updated_at=now,
        )
        self._tasks[task.id] = task
        return task

    def get(self, owner_id: int, task_id: int) -> Task:
        """Fetch one of ``owner_id``'s tasks.

        Raises:
            TaskNotFoundError: If missing or owned by another user
        """
        task = self._tasks.get(task_id)
        if task is None or task.user_id != owner_id:
            raise TaskNotFoundError("Task not found")
        return task

    def update(self, owner_id: int, task_id: int, changes: TaskUpdate) -> Task:
        """Merge ``changes`` into a task and return the result.

        Raises:
            TaskNotFoundError: If missing or owned by another user
        """
        task = self.get(owner_id, task_id)

        merged: dict = {}
        for field in ("title", "description", "due_date", "status"):
            value = getattr(changes, field)
            if value is not None and value != "":
                merged[field] = value
        if changes.image_provided():
            merged["image"] = changes.image or None

        # updated_at must move forward even when the clock has not
        now = datetime.now(UTC)
        merged["updated_at"] = max(now, task.updated_at + _TICK)

        updated = task.model_copy(update=merged)
        self._tasks[task_id] = updated
        return updated

    def delete(self, owner_id: int, task_id: int) -> None:
        """Remove a task.

        Raises:
            TaskNotFoundError: If missing or owned by another user
        """
        self.get(owner_id, task_id)
        del self._tasks[task_id]

    def __len__(self) -> int:
        return len(self._tasks)
