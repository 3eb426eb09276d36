"""
Pytest configuration and shared fixtures.

Provides fixtures for temp directories, task stores, app instances and an
isolated XDG environment used across the test suite.
"""

import json
from pathlib import Path

import pytest

from todo_tui.core.config import clear_cache
from todo_tui.core.config.models import TodoConfig
from todo_tui.core.tasks.store import TaskStore
from todo_tui.tui.app import TodoApp
from todo_tui.utils.logging import ActivityLog

# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """
    Keep tests away from the real home directory.

    Points HOME and the XDG directories into tmp_path and removes any TODO_*
    variables inherited from the developer's shell.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for name in (
        "TODO_FILE",
        "TODO_BACKUP_DIR",
        "TODO_AUTOSAVE",
        "TODO_STATUS_TIMEOUT",
        "TODO_ACTIVITY_LOG",
    ):
        monkeypatch.delenv(name, raising=False)

    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def user_config_dir(tmp_path):
    """Provide the temporary XDG_CONFIG_HOME/todo directory."""
    config_dir = tmp_path / "config" / "todo"
    config_dir.mkdir(parents=True)
    return config_dir


# ==============================================================================
# Store Fixtures
# ==============================================================================


@pytest.fixture
def state_file(tmp_path) -> Path:
    """Path of a task file that does not exist yet."""
    return tmp_path / "todo.json"


@pytest.fixture
def store(state_file) -> TaskStore:
    """Provide an empty store backed by a temporary file."""
    return TaskStore(state_file)


@pytest.fixture
def populated_store(store) -> TaskStore:
    """Provide a store with three tasks, the second one done."""
    store.add("buy milk")
    second = store.add("write report")
    store.add("call mom")
    store.toggle(second)
    return store


@pytest.fixture
def legacy_file(tmp_path) -> Path:
    """A task file in the legacy, unversioned format."""
    path = tmp_path / "todo.json"
    data = {
        "tasks": [
            {
                "description": "buy milk",
                "status": "Done",
                "created_at": "2024-03-01T09:30:00+01:00",
            },
            {
                "description": "write report",
                "status": "Pending",
                "created_at": "2024-03-02T10:00:00+01:00",
            },
            {
                "description": "call mom",
                "status": "Undone",
                "created_at": "2024-03-03T11:15:00+01:00",
            },
        ]
    }
    path.write_text(json.dumps(data))
    return path


# ==============================================================================
# App Fixtures
# ==============================================================================


@pytest.fixture
def config(state_file) -> TodoConfig:
    """Config with activity logging off, pointing at the temp state file."""
    return TodoConfig(data_file=state_file, activity_log=False)


@pytest.fixture
def app(store, config) -> TodoApp:
    """Provide an app over an empty store."""
    return TodoApp(store, config=config, activity=ActivityLog(None))
