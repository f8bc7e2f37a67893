"""Task data models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    """Lifecycle states of a task."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class _CamelModel(BaseModel):
    """Base model exchanging camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_api(self) -> dict:
        """Dump as a JSON-compatible dict with wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


class Task(_CamelModel):
    """Task model representing a complete task entity.

    Attributes:
        id: Sequential identifier assigned by the server
        user_id: Owning user, fixed at creation
        title: Short task title
        description: Longer free-form description
        due_date: When the task is due
        status: Current lifecycle state
        image: Optional opaque payload, usually a base64 data URI
        created_at: Creation timestamp
        updated_at: Last update timestamp
        is_local: Client-side marker for tasks not yet known to the server
    """

    id: int
    user_id: int
    title: str
    description: str
    due_date: datetime
    status: TaskStatus = TaskStatus.PENDING
    image: str | None = None
    created_at: datetime
    updated_at: datetime
    is_local: bool = False


class TaskCreate(_CamelModel):
    """Model for creating a new task.

    Attributes:
        title: Task title (required)
        description: Task description (required)
        due_date: Due date (required)
        status: Initial status, pending when omitted
        image: Optional image payload
    """

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    due_date: datetime
    status: TaskStatus = TaskStatus.PENDING
    image: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        """Treat a null or empty status as pending."""
        return v or TaskStatus.PENDING


class TaskUpdate(_CamelModel):
    """Partial update for an existing task.

    Plain fields only overwrite when given a non-empty value. ``image`` is
    three-way: left out it is untouched, sent as null or "" it is cleared,
    otherwise it is replaced. Use :meth:`image_provided` rather than
    checking the value.
    """

    title: str | None = None
    description: str | None = None
    due_date: datetime | None = None
    status: TaskStatus | None = None
    image: str | None = None

    @field_validator("due_date", "status", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """An empty string means "keep the stored value"."""
        return None if v == "" else v

    def image_provided(self) -> bool:
        """Whether the payload explicitly carried an ``image`` key."""
        return "image" in self.model_fields_set

    def to_api(self) -> dict:
        """Dump only the fields that were explicitly set."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class TaskCounts(BaseModel):
    """Per-status task counts."""

    total: int = 0
    pending: int = 0
    in_progress: int = Field(default=0, serialization_alias="inProgress")
    completed: int = 0
