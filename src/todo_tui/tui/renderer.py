"""
Rich-based renderer for the todo list.

Builds the full-screen layout from the app state: the task list, the input
line and the status line.
"""

from datetime import datetime

from rich.console import Console, RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from todo_tui.core.tasks.models import Task, TaskView

from .app import Mode, StatusLevel, StatusMessage, TodoApp

INPUT_HEIGHT = 3
STATUS_HEIGHT = 3
# Borders of the task panel plus the input and status panels.
CHROME_HEIGHT = INPUT_HEIGHT + STATUS_HEIGHT + 2

UNDONE_STYLE = "red"
DONE_STYLE = "green strike"

PROMPTS = {
    Mode.ADDING: "New Task: ",
    Mode.FILTERING: "Filter: ",
    Mode.EDITING: "Edit Task: ",
    Mode.CONFIRM_RESET: "Reset all tasks? (y/n) ",
}


class TodoRenderer:
    """
    Render the todo interface using Rich.

    The screen displays:
    - Task list: visible tasks with completion markers and the cursor
    - Input: the text being typed in add/edit/filter mode
    - Status: the latest status message

    Example:
        >>> renderer = TodoRenderer()
        >>> renderer.render(app)  # Returns Rich Layout
    """

    def __init__(self, console: Console | None = None):
        """
        Initialize the renderer.

        Args:
            console: Rich console for rendering. If None, creates a new one.
        """
        self.console = console or Console()

    def render(self, app: TodoApp, now: datetime | None = None) -> Layout:
        """
        Render the full screen layout from app state.

        Args:
            app: Application whose state should be displayed
            now: Current time, used to expire status messages

        Returns:
            Rich Layout containing all panels
        """
        view = app.view()

        layout = Layout()
        layout.split_column(
            Layout(name="tasks"),
            Layout(name="input", size=INPUT_HEIGHT),
            Layout(name="status", size=STATUS_HEIGHT),
        )

        layout["tasks"].update(self._render_tasks(view))
        layout["input"].update(self._render_input(app))
        layout["status"].update(self._render_status(app.current_status(now)))

        return layout

    def _rows_available(self) -> int:
        return max(1, self.console.size.height - CHROME_HEIGHT)

    def _render_tasks(self, view: TaskView) -> Panel:
        """Render the task list panel."""
        title = (
            "[bold]Todo List (d: delete, D: remove done, Space: toggle) "
            f"{view.completion_percentage:.1f}% Complete[/bold]"
        )

        if not view.tasks:
            if view.filter_query:
                message = f"No tasks match '{view.filter_query}'"
            else:
                message = "No tasks yet. Press o to add one."
            content: RenderableType = Text(message, style="dim italic", justify="center")
        else:
            table = Table.grid(padding=(0, 1))
            table.add_column(width=2)  # Cursor marker
            table.add_column()  # Task

            start, end = self._window(len(view.tasks), view.cursor)
            for index in range(start, end):
                selected = index == view.cursor
                table.add_row(
                    Text("> " if selected else "  ", style="bold"),
                    self._render_task(view.tasks[index], selected),
                )
            content = table

        subtitle = f"filter: {view.filter_query}" if view.filter_query else None
        return Panel(content, title=title, subtitle=subtitle, border_style="blue")

    def _window(self, count: int, cursor: int | None) -> tuple[int, int]:
        """Slice of the visible tasks that fits on screen and contains the cursor."""
        rows = self._rows_available()
        if count <= rows:
            return 0, count
        start = 0 if cursor is None else max(0, cursor - rows + 1)
        return start, min(count, start + rows)

    def _render_task(self, task: Task, selected: bool) -> Text:
        symbol = "[x]" if task.done else "[ ]"
        style = DONE_STYLE if task.done else UNDONE_STYLE
        if selected:
            style = f"bold {style}"
        return Text(f"{symbol} {task.text}", style=style)

    def _render_input(self, app: TodoApp) -> Panel:
        """Render the input line for add, edit, filter and confirm modes."""
        prompt = PROMPTS.get(app.mode)
        text = Text(style="yellow")
        if prompt is not None:
            text.append(prompt, style="bold yellow")
            if app.mode.is_text_entry:
                text.append(app.buffer)
                text.append("_", style="blink")
        return Panel(text, title="Input", border_style="yellow")

    def _render_status(self, status: StatusMessage | None) -> Panel:
        """Render the status line."""
        if status is None:
            return Panel(Text(""), title="Status", border_style="green")
        style = self._get_status_style(status.level)
        return Panel(Text(status.text, style=style), title="Status", border_style=style)

    def _get_status_style(self, level: StatusLevel) -> str:
        """Get Rich style for a status level."""
        style_map = {
            StatusLevel.INFO: "green",
            StatusLevel.WARNING: "yellow",
            StatusLevel.ERROR: "bold red",
        }
        return style_map.get(level, "green")
