"""
Unit tests for task models.

Tests validation of Task, the state file layout, legacy records and the
view snapshot.
"""

import pytest
from pydantic import ValidationError

from todo_tui.core.tasks.exceptions import StorageError, TaskNotFoundError, TodoError
from todo_tui.core.tasks.models import (
    LegacyTask,
    LoadResult,
    LoadStatus,
    Task,
    TaskFile,
    TaskView,
)


class TestTask:
    """Test the Task model."""

    def test_text_is_stripped(self):
        task = Task(id=1, text="  buy milk  ")
        assert task.text == "buy milk"

    def test_empty_text_rejected(self):
        with pytest.raises(ValidationError):
            Task(id=1, text="   ")

    def test_id_must_be_positive(self):
        with pytest.raises(ValidationError):
            Task(id=0, text="x")

    def test_id_is_frozen(self):
        """Test the id cannot be reassigned."""
        task = Task(id=1, text="x")
        with pytest.raises(ValidationError):
            task.id = 2

    def test_created_at_is_timezone_aware(self):
        task = Task(id=1, text="x")
        assert task.created_at.tzinfo is not None

    @pytest.mark.parametrize(
        "query,expected",
        [("milk", True), ("MILK", True), ("Buy M", True), ("bread", False)],
    )
    def test_matches(self, query, expected):
        """Test case-insensitive substring matching."""
        assert Task(id=1, text="buy milk").matches(query) is expected


class TestTaskFile:
    """Test the state file layout."""

    def test_defaults(self):
        data = TaskFile()
        assert data.version == 1
        assert data.next_id == 1
        assert data.tasks == []

    def test_round_trip_json(self):
        """Test the serialized form parses back to the same tasks."""
        original = TaskFile(next_id=3, tasks=[Task(id=1, text="a"), Task(id=2, text="b", done=True)])
        parsed = TaskFile.model_validate_json(original.model_dump_json())

        assert parsed == original


class TestLegacyTask:
    """Test records in the legacy file format."""

    @pytest.mark.parametrize(
        "status,done", [("Done", True), ("Pending", False), ("Undone", False)]
    )
    def test_status_maps_to_done(self, status, done):
        assert LegacyTask(description="x", status=status).done is done

    def test_extra_fields_ignored(self):
        legacy = LegacyTask.model_validate({"description": "x", "priority": 3})
        assert legacy.description == "x"


class TestTaskView:
    """Test the view snapshot."""

    def test_frozen(self):
        view = TaskView()
        with pytest.raises(ValidationError):
            view.cursor = 1

    def test_completion_percentage(self):
        view = TaskView(total=4, done=1)
        assert view.completion_percentage == 25.0

    def test_current(self):
        view = TaskView(tasks=[Task(id=1, text="a"), Task(id=2, text="b")], cursor=1)
        assert view.current.id == 2
        assert TaskView().current is None


class TestLoadResult:
    def test_only_corrupt_is_warning(self):
        assert LoadResult(status=LoadStatus.CORRUPT, message="x").is_warning
        assert not LoadResult(status=LoadStatus.MISSING, message="x").is_warning
        assert not LoadResult(status=LoadStatus.LOADED, message="x").is_warning


class TestExceptions:
    """Test the exception hierarchy."""

    def test_task_not_found(self):
        error = TaskNotFoundError(42)
        assert str(error) == "Task 42 not found"
        assert error.task_id == 42
        assert isinstance(error, TodoError)

    def test_storage_error_path(self, tmp_path):
        error = StorageError("disk full", path=tmp_path)
        assert error.path == tmp_path
        assert str(error) == "disk full"
