"""
Interactive todo application state.

TodoApp is the read-eval half of the interface: it receives decoded keys,
looks them up in the dispatch tables for its current mode, runs the
matching task store operation and records the outcome as a status message.
It never touches the terminal, so every transition can be driven directly
in tests.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from todo_tui.core.config.models import TodoConfig
from todo_tui.core.tasks.exceptions import (
    InvalidInputError,
    StorageError,
    TaskNotFoundError,
    TodoError,
)
from todo_tui.core.tasks.models import Direction, LoadResult, LoadStatus, TaskView
from todo_tui.core.tasks.store import TaskStore
from todo_tui.utils.logging import ActivityLog, EventType

from .commands import (
    HELP_TEXT,
    Command,
    browse_command,
    confirm_command,
    entry_command,
    global_command,
)
from .keys import Key

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    """Interaction modes of the loop."""

    BROWSING = "browsing"
    ADDING = "adding"
    FILTERING = "filtering"
    EDITING = "editing"
    CONFIRM_RESET = "confirm_reset"

    @property
    def is_text_entry(self) -> bool:
        return self in (Mode.ADDING, Mode.FILTERING, Mode.EDITING)


class StatusLevel(str, Enum):
    """Severity of a status line message."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class StatusMessage(BaseModel):
    """A message shown on the status line."""

    text: str = Field(..., description="Message text")
    level: StatusLevel = Field(default=StatusLevel.INFO, description="Message severity")
    created_at: datetime = Field(default_factory=datetime.now, description="When it was shown")
    sticky: bool = Field(default=False, description="Stay visible until replaced")

    def is_expired(self, now: datetime, timeout: float) -> bool:
        if self.sticky or timeout <= 0:
            return False
        return (now - self.created_at).total_seconds() >= timeout

    def time_left(self, now: datetime, timeout: float) -> float | None:
        """Seconds until the message expires, or None if it never does."""
        if self.sticky or timeout <= 0:
            return None
        return max(0.0, timeout - (now - self.created_at).total_seconds())


class TodoApp:
    """
    Mode machine driving a TaskStore from key presses.

    The app holds the only reference to the store for the whole session.

    Example:
        >>> app = TodoApp(TaskStore(path))
        >>> for key in [Key.of("o"), *map(Key.of, "buy milk"), Key(KeyName.ENTER)]:
        ...     app.handle_key(key)
        >>> [t.text for t in app.view().tasks]
        ['buy milk']
    """

    def __init__(
        self,
        store: TaskStore,
        config: TodoConfig | None = None,
        activity: ActivityLog | None = None,
    ):
        self.store = store
        self.config = config or TodoConfig(data_file=store.path)
        self.activity = activity or ActivityLog(None)

        self.mode = Mode.BROWSING
        self.buffer = ""
        self.search_query: str | None = None
        self.status: StatusMessage | None = None
        self.running = True
        self.save_error: StorageError | None = None

        self._editing_id: int | None = None
        self._quit_armed = False

        self._browse_actions: dict[Command, Callable[[], None]] = {
            Command.MOVE_NEXT: lambda: self.store.move_cursor(Direction.NEXT),
            Command.MOVE_PREV: lambda: self.store.move_cursor(Direction.PREV),
            Command.TOGGLE: self._toggle_current,
            Command.START_ADD: lambda: self._start_entry(Mode.ADDING),
            Command.START_FILTER: lambda: self._start_entry(Mode.FILTERING),
            Command.START_EDIT: self._start_edit,
            Command.FIND_NEXT: lambda: self._find(forward=True),
            Command.FIND_PREV: lambda: self._find(forward=False),
            Command.BACKUP: self._backup,
            Command.RESET: self._request_reset,
            Command.DELETE: self._delete_current,
            Command.REMOVE_DONE: self._remove_done,
            Command.HELP: lambda: self.set_status(HELP_TEXT, sticky=True),
            Command.QUIT: self.quit,
        }

    # ------------------------------------------------------------------
    # Public interface used by the terminal loop
    # ------------------------------------------------------------------

    def view(self) -> TaskView:
        return self.store.view()

    def set_status(
        self, text: str, level: StatusLevel = StatusLevel.INFO, sticky: bool = False
    ) -> None:
        self.status = StatusMessage(text=text, level=level, sticky=sticky)

    def current_status(self, now: datetime | None = None) -> StatusMessage | None:
        """Status message to display, dropping it once it has timed out."""
        if self.status is None:
            return None
        if self.status.is_expired(now or datetime.now(), self.config.status_timeout):
            self.status = None
        return self.status

    def status_time_left(self, now: datetime | None = None) -> float | None:
        """How long the loop may wait for a key before the status line must be redrawn."""
        if self.status is None:
            return None
        return self.status.time_left(now or datetime.now(), self.config.status_timeout)

    def report_load(self, result: LoadResult) -> None:
        """Show the outcome of the initial load on the status line."""
        if result.status == LoadStatus.CORRUPT:
            self.set_status(result.message, StatusLevel.WARNING, sticky=True)
            self.activity.log_error(result.message, {"path": str(self.store.path)})
        else:
            self.set_status(result.message)
        self.activity.log_event(
            EventType.SESSION_START,
            {"path": str(self.store.path), "load": result.status.value, "tasks": len(self.store)},
        )

    def handle_key(self, key: Key) -> bool:
        """
        Process one key press.

        Task store errors are turned into status messages here; none of
        them stops the loop.

        Returns:
            False once the app has quit, True otherwise
        """
        try:
            if global_command(key) == Command.INTERRUPT:
                logger.info("Interrupted, quitting")
                self.quit(force=True)
            elif self.mode == Mode.BROWSING:
                self._handle_browse(key)
            elif self.mode == Mode.CONFIRM_RESET:
                self._handle_confirm(key)
            else:
                self._handle_entry(key)
        except InvalidInputError as e:
            self.set_status(str(e), StatusLevel.WARNING)
        except TaskNotFoundError as e:
            logger.error("View and store out of sync: %s", e)
            self.set_status(str(e), StatusLevel.ERROR)
        except StorageError as e:
            logger.error("%s", e)
            self.activity.log_error(str(e))
            self.set_status(str(e), StatusLevel.ERROR)
        except TodoError as e:
            logger.exception("Unexpected task store error")
            self.set_status(str(e), StatusLevel.ERROR)
        return self.running

    def quit(self, force: bool = False) -> None:
        """
        Save and stop.

        If saving fails the app stays open and shows the error; quitting
        again (or ``force``) stops without saving, keeping the error in
        ``save_error`` for the caller to report.
        """
        try:
            self.store.save()
        except StorageError as e:
            logger.error("Save on quit failed: %s", e)
            self.save_error = e
            if not (force or self._quit_armed):
                self._quit_armed = True
                self.set_status(
                    f"{e}. Press q again to quit without saving.", StatusLevel.ERROR, sticky=True
                )
                return
        else:
            self.save_error = None

        self.activity.log_event(
            EventType.SESSION_END, {"tasks": len(self.store), "saved": self.save_error is None}
        )
        self.running = False

    # ------------------------------------------------------------------
    # Mode handlers
    # ------------------------------------------------------------------

    def _handle_browse(self, key: Key) -> None:
        command = browse_command(key)
        if command is None:
            return
        if command != Command.QUIT:
            self._quit_armed = False
        self._browse_actions[command]()

    def _handle_entry(self, key: Key) -> None:
        command = entry_command(key)
        if command == Command.INSERT:
            self.buffer += key.char
            if self.mode == Mode.FILTERING:
                self.store.set_filter(self.buffer)
        elif command == Command.ERASE:
            self.buffer = self.buffer[:-1]
            if self.mode == Mode.FILTERING:
                self.store.set_filter(self.buffer)
        elif command == Command.SUBMIT:
            self._submit()
        elif command == Command.CANCEL:
            self._cancel()

    def _handle_confirm(self, key: Key) -> None:
        command = confirm_command(key)
        if command == Command.CONFIRM:
            self.mode = Mode.BROWSING
            self._reset()
        elif command == Command.DECLINE:
            self.mode = Mode.BROWSING
            self.set_status("Reset canceled.")

    # ------------------------------------------------------------------
    # Text entry
    # ------------------------------------------------------------------

    def _start_entry(self, mode: Mode) -> None:
        self.mode = mode
        self.buffer = ""

    def _start_edit(self) -> None:
        task = self.store.current()
        if task is None:
            self.set_status("Nothing to edit.")
            return
        self._editing_id = task.id
        self.mode = Mode.EDITING
        self.buffer = task.text

    def _finish_entry(self) -> None:
        self.mode = Mode.BROWSING
        self.buffer = ""
        self._editing_id = None

    def _submit(self) -> None:
        changed = False
        # add() and edit() raise InvalidInputError before the mode is left,
        # so the buffer stays open for correction.
        if self.mode == Mode.ADDING:
            task_id = self.store.add(self.buffer)
            task = self.store.get(task_id)
            self.activity.log_event(
                EventType.TASK_ADDED, {"task_id": task_id, "text": task.text if task else ""}
            )
            self.set_status("Task added.")
            changed = True
        elif self.mode == Mode.EDITING and self._editing_id is not None:
            self.store.edit(self._editing_id, self.buffer)
            self.activity.log_event(
                EventType.TASK_EDITED, {"task_id": self._editing_id, "text": self.buffer.strip()}
            )
            self.set_status("Task updated.")
            changed = True
        elif self.mode == Mode.FILTERING:
            self.search_query = self.buffer or None
            self.store.set_filter(self.search_query)
            if self.search_query:
                self.set_status(f"Filter: {self.search_query}")
            else:
                self.set_status("Filter cleared.")

        self._finish_entry()
        if changed:
            self._changed()

    def _cancel(self) -> None:
        if self.mode == Mode.FILTERING:
            self.store.set_filter(None)
            self.search_query = None
            self.set_status("Filter cleared.")
        self._finish_entry()

    # ------------------------------------------------------------------
    # Browsing actions
    # ------------------------------------------------------------------

    def _toggle_current(self) -> None:
        task = self.store.current()
        if task is None:
            return
        done = self.store.toggle(task.id)
        self.activity.log_event(EventType.TASK_TOGGLED, {"task_id": task.id, "done": done})
        self._changed()

    def _delete_current(self) -> None:
        task = self.store.current()
        if task is None:
            return
        self.store.delete(task.id)
        self.activity.log_event(EventType.TASK_DELETED, {"task_id": task.id, "text": task.text})
        self.set_status("Task deleted.")
        self._changed()

    def _remove_done(self) -> None:
        removed = self.store.remove_done()
        self.activity.log_event(EventType.DONE_REMOVED, {"count": removed})
        self.set_status(f"Completed tasks removed ({removed}).")
        self._changed()

    def _find(self, forward: bool) -> None:
        if not self.search_query:
            self.set_status("No search query. Press / to set one.")
            return
        if forward:
            found = self.store.find_next(self.search_query)
        else:
            found = self.store.find_prev(self.search_query)
        if not found:
            self.set_status(f"No match for '{self.search_query}'.", StatusLevel.WARNING)

    def _backup(self) -> None:
        path = self.store.backup()
        self.activity.log_event(EventType.BACKUP, {"path": str(path), "tasks": len(self.store)})
        self.set_status(f"Backup created successfully! ({path.name})")

    def _request_reset(self) -> None:
        if self.config.confirm_reset:
            self.mode = Mode.CONFIRM_RESET
            self.set_status("Press 'y' to confirm reset, 'n' to cancel.", sticky=True)
        else:
            self._reset()

    def _reset(self) -> None:
        try:
            path = self.store.backup()
        except StorageError as e:
            logger.error("Reset aborted, backup failed: %s", e)
            self.activity.log_error(str(e))
            self.set_status("Backup failed. Reset canceled.", StatusLevel.ERROR)
            return

        removed = len(self.store)
        self.store.reset()
        self.search_query = None
        self.activity.log_event(EventType.RESET, {"backup": str(path), "removed": removed})
        self.store.save()
        self.set_status("Backup created and todo list reset.")

    def _changed(self) -> None:
        if self.config.autosave:
            self.store.save()
