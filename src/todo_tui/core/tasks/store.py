"""
In-memory task store with JSON file persistence.

The store owns the ordered task list together with the filter and cursor
state of the interface. Persistence is explicit: nothing touches the disk
until ``save()``, ``backup()`` or ``load()`` is called.
"""

import json
import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .exceptions import CorruptStateError, InvalidInputError, StorageError, TaskNotFoundError
from .models import (
    Direction,
    LegacyTask,
    LoadResult,
    LoadStatus,
    Task,
    TaskFile,
    TaskId,
    TaskView,
)

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


class TaskStore:
    """
    Ordered collection of tasks plus the filter/cursor state of the view.

    Tasks are kept in insertion order. A filter only hides tasks from the
    visible view, it never reorders them. The cursor always points into the
    visible view and is None exactly when that view is empty.

    Example:
        >>> store = TaskStore(Path("~/todo.json").expanduser())
        >>> result = store.load()
        >>> task_id = store.add("buy milk")
        >>> store.toggle(task_id)
        True
        >>> store.save()
    """

    def __init__(self, path: Path, backup_dir: Path | None = None):
        """
        Initialize an empty store.

        Args:
            path: Primary state file used by save() and load()
            backup_dir: Directory for backup snapshots (defaults to the
                state file's directory)
        """
        self.path = Path(path)
        self.backup_dir = Path(backup_dir) if backup_dir else self.path.parent

        self.tasks: list[Task] = []
        self.filter_query: str | None = None
        self.cursor: int | None = None
        self._next_id: TaskId = 1

    def __len__(self) -> int:
        return len(self.tasks)

    @property
    def next_id(self) -> TaskId:
        """Id that the next added task will receive."""
        return self._next_id

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def visible(self) -> list[Task]:
        """Return the tasks matching the active filter, in store order."""
        if self.filter_query is None:
            return list(self.tasks)
        return [t for t in self.tasks if t.matches(self.filter_query)]

    def current(self) -> Task | None:
        """Return the task under the cursor, if any."""
        if self.cursor is None:
            return None
        visible = self.visible()
        if not 0 <= self.cursor < len(visible):
            return None
        return visible[self.cursor]

    def view(self) -> TaskView:
        """Build a snapshot of the visible view for rendering."""
        self._clamp_cursor()
        total, done = self.counts()
        return TaskView(
            tasks=[t.model_copy() for t in self.visible()],
            cursor=self.cursor,
            filter_query=self.filter_query,
            total=total,
            done=done,
        )

    def get(self, task_id: TaskId) -> Task | None:
        """Get a task by id."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def counts(self) -> tuple[int, int]:
        """Return (total, done) over all tasks, ignoring the filter."""
        return len(self.tasks), sum(1 for t in self.tasks if t.done)

    def completion_percentage(self) -> float:
        """Percentage of completed tasks (0.0 for an empty store)."""
        total, done = self.counts()
        if total == 0:
            return 0.0
        return done / total * 100

    def _require(self, task_id: TaskId) -> Task:
        task = self.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def _clamp_cursor(self) -> None:
        count = len(self.visible())
        if count == 0:
            self.cursor = None
        elif self.cursor is None:
            self.cursor = 0
        else:
            self.cursor = min(max(self.cursor, 0), count - 1)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add(self, text: str) -> TaskId:
        """
        Append a new task.

        The cursor moves onto the new task when it is visible under the
        active filter.

        Args:
            text: Task description (surrounding whitespace is stripped)

        Returns:
            Id of the new task

        Raises:
            InvalidInputError: If text is empty after trimming
        """
        if not text or not text.strip():
            raise InvalidInputError()

        task = Task(id=self._next_id, text=text)
        self._next_id += 1
        self.tasks.append(task)

        for index, visible_task in enumerate(self.visible()):
            if visible_task.id == task.id:
                self.cursor = index
                break
        else:
            self._clamp_cursor()

        logger.debug("Task added id=%s text=%r", task.id, task.text)
        return task.id

    def toggle(self, task_id: TaskId) -> bool:
        """
        Flip the completion flag of a task.

        Returns:
            The new value of ``done``

        Raises:
            TaskNotFoundError: If no task has this id
        """
        task = self._require(task_id)
        task.done = not task.done
        logger.debug("Task toggled id=%s done=%s", task.id, task.done)
        return task.done

    def edit(self, task_id: TaskId, text: str) -> None:
        """
        Replace the text of a task.

        Raises:
            InvalidInputError: If text is empty after trimming
            TaskNotFoundError: If no task has this id
        """
        if not text or not text.strip():
            raise InvalidInputError()
        task = self._require(task_id)
        task.text = text.strip()
        self._clamp_cursor()
        logger.debug("Task edited id=%s text=%r", task.id, task.text)

    def delete(self, task_id: TaskId) -> Task:
        """
        Remove a task from the store.

        Returns:
            The removed task

        Raises:
            TaskNotFoundError: If no task has this id
        """
        task = self._require(task_id)
        self.tasks.remove(task)
        self._clamp_cursor()
        logger.debug("Task deleted id=%s", task.id)
        return task

    def remove_done(self) -> int:
        """
        Remove every completed task.

        Returns:
            Number of tasks removed
        """
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if not t.done]
        removed = before - len(self.tasks)
        self.cursor = 0
        self._clamp_cursor()
        logger.debug("Removed %d done tasks", removed)
        return removed

    def move_cursor(self, direction: Direction) -> None:
        """Move the cursor one step, stopping at both ends of the view."""
        count = len(self.visible())
        if count == 0:
            self.cursor = None
            return

        current = self.cursor if self.cursor is not None else 0
        if direction == Direction.NEXT:
            self.cursor = min(current + 1, count - 1)
        else:
            self.cursor = max(current - 1, 0)

    def set_filter(self, query: str | None) -> None:
        """
        Set or clear the filter and put the cursor back on the first row.

        An empty query is the same as no filter.
        """
        self.filter_query = query or None
        self.cursor = 0 if self.visible() else None

    def find_next(self, query: str) -> bool:
        """Move the cursor to the next visible match, wrapping around."""
        return self._find(query, step=1)

    def find_prev(self, query: str) -> bool:
        """Move the cursor to the previous visible match, wrapping around."""
        return self._find(query, step=-1)

    def _find(self, query: str, step: int) -> bool:
        if not query:
            return False
        visible = self.visible()
        count = len(visible)
        if count == 0:
            return False

        start = self.cursor if self.cursor is not None else 0
        # Offsets 1..count end on the starting row, so a lone match is always found.
        for offset in range(1, count + 1):
            index = (start + step * offset) % count
            if visible[index].matches(query):
                self.cursor = index
                return True
        return False

    def reset(self) -> None:
        """
        Drop every task and clear the filter.

        Ids are not recycled: the id counter keeps counting after a reset.
        """
        removed = len(self.tasks)
        self.tasks = []
        self.filter_query = None
        self.cursor = None
        logger.info("Task list reset (%d tasks removed)", removed)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _to_file(self) -> TaskFile:
        return TaskFile(next_id=self._next_id, tasks=self.tasks)

    def _write_atomic(self, target: Path, data: TaskFile) -> None:
        """
        Write a state file atomically.

        Uses a temporary file and atomic rename to prevent corruption
        on write failures.
        """
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.stem}_", suffix=".json.tmp"
        )

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data.model_dump_json(indent=2))
                f.write("\n")

            os.replace(temp_path, target)

        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def save(self) -> None:
        """
        Write all tasks (ignoring the filter) to the primary state file.

        Raises:
            StorageError: If the file cannot be written
        """
        try:
            self._write_atomic(self.path, self._to_file())
        except OSError as e:
            raise StorageError(f"Failed to save {self.path}: {e}", path=self.path) from e
        logger.debug("Saved %d tasks to %s", len(self.tasks), self.path)

    def _backup_path(self, now: datetime) -> Path:
        stem = self.path.stem or "todo"
        suffix = self.path.suffix or ".json"
        stamp = now.strftime(BACKUP_TIMESTAMP_FORMAT)

        candidate = self.backup_dir / f"{stem}.{stamp}{suffix}"
        counter = 1
        while candidate.exists() or candidate == self.path:
            candidate = self.backup_dir / f"{stem}.{stamp}-{counter}{suffix}"
            counter += 1
        return candidate

    def backup(self) -> Path:
        """
        Write a timestamped snapshot of all tasks.

        The snapshot never replaces the primary state file or an earlier
        backup. In-memory state is left untouched.

        Returns:
            Path of the new backup file

        Raises:
            StorageError: If the backup cannot be written
        """
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            target = self._backup_path(datetime.now())
            self._write_atomic(target, self._to_file())
        except OSError as e:
            raise StorageError(f"Backup failed: {e}", path=self.backup_dir) from e
        logger.info("Backed up %d tasks to %s", len(self.tasks), target)
        return target

    def load(self) -> LoadResult:
        """
        Replace the in-memory tasks with the contents of the state file.

        A missing (or empty) file starts a fresh list. A corrupt file also
        starts a fresh list, but is copied aside first and reported as a
        warning so the caller can tell the user.

        Returns:
            LoadResult describing what happened

        Raises:
            StorageError: If the file exists but cannot be read
        """
        if not self.path.exists():
            self._replace_state(TaskFile())
            logger.info("No state file at %s, starting fresh", self.path)
            return LoadResult(status=LoadStatus.MISSING, message="No saved tasks, starting fresh")

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {self.path}: {e}", path=self.path) from e

        if not raw.strip():
            self._replace_state(TaskFile())
            return LoadResult(status=LoadStatus.MISSING, message="No saved tasks, starting fresh")

        try:
            state = self._parse(raw)
        except CorruptStateError as e:
            logger.warning("%s", e)
            self._replace_state(TaskFile())
            message = f"Saved tasks are corrupt, starting with an empty list ({e})"
            kept = self._preserve_corrupt_file()
            if kept is not None:
                message += f"; original kept as {kept.name}"
            return LoadResult(status=LoadStatus.CORRUPT, message=message)

        self._replace_state(state)
        logger.info("Loaded %d tasks from %s", len(self.tasks), self.path)
        return LoadResult(
            status=LoadStatus.LOADED,
            message=f"Loaded {len(self.tasks)} tasks",
            task_count=len(self.tasks),
        )

    def _replace_state(self, state: TaskFile) -> None:
        self.tasks = list(state.tasks)
        self._next_id = state.next_id
        self.filter_query = None
        self.cursor = 0 if self.tasks else None

    def _parse(self, raw: str) -> TaskFile:
        """
        Parse state file contents.

        Accepts the current format, a bare list of tasks, and files written
        in the legacy format (records without ids).

        Raises:
            CorruptStateError: If the contents cannot be understood
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptStateError(f"Failed to parse {self.path}: {e}", path=self.path) from e

        if isinstance(data, list):
            data = {"tasks": data}
        if not isinstance(data, dict):
            raise CorruptStateError(f"{self.path} must contain a JSON object", path=self.path)

        # An object without a task list is not a task file.
        if "tasks" not in data:
            raise CorruptStateError(f"{self.path} has no 'tasks' list", path=self.path)
        records = data["tasks"]
        if not isinstance(records, list):
            raise CorruptStateError(f"'tasks' in {self.path} must be a list", path=self.path)

        try:
            if records and all(self._is_legacy(r) for r in records):
                state = self._migrate_legacy(records)
            else:
                state = TaskFile.model_validate(data)
        except ValidationError as e:
            raise CorruptStateError(
                f"Invalid task data in {self.path}: {e.error_count()} errors", path=self.path
            ) from e

        ids = [t.id for t in state.tasks]
        if len(ids) != len(set(ids)):
            raise CorruptStateError(f"Duplicate task ids in {self.path}", path=self.path)

        highest = max(ids, default=0)
        if state.next_id <= highest:
            state.next_id = highest + 1
        return state

    @staticmethod
    def _is_legacy(record: Any) -> bool:
        return isinstance(record, dict) and "id" not in record and "description" in record

    @staticmethod
    def _migrate_legacy(records: list[Any]) -> TaskFile:
        tasks = []
        for number, record in enumerate(records, start=1):
            legacy = LegacyTask.model_validate(record)
            fields: dict[str, Any] = {"id": number, "text": legacy.description, "done": legacy.done}
            if legacy.created_at is not None:
                fields["created_at"] = legacy.created_at
            tasks.append(Task(**fields))
        logger.info("Imported %d tasks from legacy format", len(tasks))
        return TaskFile(next_id=len(tasks) + 1, tasks=tasks)

    def _preserve_corrupt_file(self) -> Path | None:
        stamp = datetime.now().strftime(BACKUP_TIMESTAMP_FORMAT)
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            shutil.copy2(self.path, target)
        except OSError:
            logger.exception("Failed to keep a copy of corrupt state file %s", self.path)
            return None
        return target
