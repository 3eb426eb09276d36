"""
Task models and the task store.

This module provides the Task model, the view snapshot handed to the
interface, and the TaskStore that owns the task list and its persistence.
"""

from .exceptions import (
    CorruptStateError,
    InvalidInputError,
    StorageError,
    TaskNotFoundError,
    TodoError,
)
from .models import Direction, LoadResult, LoadStatus, Task, TaskFile, TaskId, TaskView
from .store import TaskStore

__all__ = [
    # Models
    "Direction",
    "LoadResult",
    "LoadStatus",
    "Task",
    "TaskFile",
    "TaskId",
    "TaskView",
    # Store
    "TaskStore",
    # Errors
    "CorruptStateError",
    "InvalidInputError",
    "StorageError",
    "TaskNotFoundError",
    "TodoError",
]
