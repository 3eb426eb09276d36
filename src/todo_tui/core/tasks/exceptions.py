"""
Exceptions raised by the task store.

Exception Hierarchy:
    TodoError (base)
    ├── InvalidInputError (empty task text)
    ├── TaskNotFoundError (unknown task id)
    ├── StorageError (state file could not be read or written)
    └── CorruptStateError (state file could not be parsed)

Every TodoError raised by a store operation is recoverable: the interactive
loop reports it on the status line and keeps running.

Example:
    >>> from todo_tui.core.tasks.exceptions import TaskNotFoundError
    >>> try:
    ...     raise TaskNotFoundError(42)
    ... except TaskNotFoundError as e:
    ...     print(e, e.task_id)
    Task 42 not found 42
"""

from pathlib import Path


class TodoError(Exception):
    """
    Base exception for all task store errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class InvalidInputError(TodoError):
    """Raised when a task would be created or edited with empty text."""

    def __init__(self, message: str = "Task text cannot be empty") -> None:
        super().__init__(message)


class TaskNotFoundError(TodoError):
    """
    Raised when an operation references an id that is not in the store.

    The UI only ever passes ids taken from the visible view, so seeing this
    from the interactive loop means the view and the store disagree.
    """

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found", task_id=task_id)
        self.task_id = task_id


class StorageError(TodoError):
    """Raised when the state file or a backup cannot be read or written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message, path=path)
        self.path = path


class CorruptStateError(TodoError):
    """Raised when the state file exists but cannot be parsed."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message, path=path)
        self.path = path
