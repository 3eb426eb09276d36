"""
Todo - a keyboard-driven todo list for the terminal.

Tasks live in a single JSON file and are browsed, filtered, searched and
toggled from a full-screen interface.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from todo_tui.core.config.models import TodoConfig
from todo_tui.core.tasks.models import Task
from todo_tui.core.tasks.store import TaskStore

__all__ = ["Task", "TaskStore", "TodoConfig", "__version__"]
