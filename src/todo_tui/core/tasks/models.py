"""
Task data models for todo.

Defines the Task model, the on-disk state file layout, and the snapshot
types the task store hands to the interface for rendering.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

TaskId = int

STATE_FILE_VERSION = 1


def _now() -> datetime:
    return datetime.now().astimezone()


class Direction(str, Enum):
    """Cursor movement direction within the visible view."""

    NEXT = "next"
    PREV = "prev"


class Task(BaseModel):
    """
    A single todo entry.

    ``id`` and ``created_at`` are assigned once by the store and cannot be
    changed afterwards.

    Example:
        >>> task = Task(id=1, text="  buy milk ")
        >>> task.text
        'buy milk'
        >>> task.done
        False
    """

    id: TaskId = Field(..., ge=1, frozen=True, description="Unique task identifier")
    text: str = Field(..., min_length=1, description="Task description")
    done: bool = Field(default=False, description="Whether the task is completed")
    created_at: datetime = Field(
        default_factory=_now, frozen=True, description="When the task was created"
    )

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        """Store task text without surrounding whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against the task text."""
        return query.casefold() in self.text.casefold()


class TaskFile(BaseModel):
    """
    Layout of the persisted state file and of backup snapshots.

    File format:
        {
            "version": 1,
            "next_id": 3,
            "tasks": [
                {"id": 1, "text": "buy milk", "done": true, "created_at": "..."},
                ...
            ]
        }
    """

    version: int = Field(default=STATE_FILE_VERSION, description="File format version")
    next_id: TaskId = Field(default=1, ge=1, description="Next id the store will hand out")
    tasks: list[Task] = Field(default_factory=list, description="Tasks in insertion order")


class LegacyTask(BaseModel):
    """
    A task record in the legacy, unversioned file format.

    Those files hold ``{"tasks": [{"description", "status", "created_at"}]}``
    with a status of ``Undone``, ``Pending`` or ``Done`` and no ids.
    """

    model_config = ConfigDict(extra="ignore")

    description: str = Field(..., min_length=1)
    status: str = "Undone"
    created_at: datetime | None = None

    @property
    def done(self) -> bool:
        return self.status == "Done"


class TaskView(BaseModel):
    """
    Immutable snapshot of what the interface should display.

    Produced by ``TaskStore.view()`` after every command.
    """

    model_config = ConfigDict(frozen=True)

    tasks: list[Task] = Field(default_factory=list, description="Visible tasks, in order")
    cursor: int | None = Field(default=None, description="Selected index in visible tasks")
    filter_query: str | None = Field(default=None, description="Active filter, if any")
    total: int = Field(default=0, ge=0, description="Number of tasks in the store")
    done: int = Field(default=0, ge=0, description="Number of completed tasks")

    @computed_field
    @property
    def completion_percentage(self) -> float:
        """Share of completed tasks across the whole store (0-100)."""
        if self.total == 0:
            return 0.0
        return self.done / self.total * 100

    @property
    def current(self) -> Task | None:
        """Task under the cursor, if any."""
        if self.cursor is None:
            return None
        return self.tasks[self.cursor]


class LoadStatus(str, Enum):
    """Outcome of loading the state file."""

    LOADED = "loaded"
    MISSING = "missing"
    CORRUPT = "corrupt"


class LoadResult(BaseModel):
    """
    Result of ``TaskStore.load()``.

    A missing file is the normal first-run case and is informational only;
    a corrupt file is a warning the caller must show to the user.
    """

    status: LoadStatus
    message: str
    task_count: int = 0

    @property
    def is_warning(self) -> bool:
        return self.status == LoadStatus.CORRUPT
