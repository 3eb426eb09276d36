"""
Unit tests for the Rich renderer.

Renders layouts to an in-memory console and checks the text that would
reach the screen.
"""

from io import StringIO

import pytest
from rich.console import Console
from rich.layout import Layout

from todo_tui.tui.app import Mode, StatusLevel
from todo_tui.tui.renderer import TodoRenderer


@pytest.fixture
def console():
    return Console(file=StringIO(), width=100, height=30, force_terminal=False, color_system=None)


@pytest.fixture
def renderer(console):
    return TodoRenderer(console)


def screen(renderer: TodoRenderer, app) -> str:
    """Render the app and return the plain text output."""
    renderer.console.print(renderer.render(app))
    return renderer.console.file.getvalue()


class TestRenderLayout:
    """Test the overall layout."""

    def test_returns_layout(self, renderer, app):
        layout = renderer.render(app)

        assert isinstance(layout, Layout)
        assert layout["tasks"] is not None
        assert layout["input"] is not None
        assert layout["status"] is not None

    def test_panels_present(self, renderer, app):
        output = screen(renderer, app)

        assert "Todo List" in output
        assert "Input" in output
        assert "Status" in output


class TestTaskPanel:
    """Test the task list panel."""

    def test_empty_list(self, renderer, app):
        assert "No tasks yet" in screen(renderer, app)

    def test_tasks_and_markers(self, renderer, app):
        app.store.add("buy milk")
        app.store.add("write report")
        app.store.toggle(1)

        output = screen(renderer, app)

        assert "[x] buy milk" in output
        selected = next(line for line in output.splitlines() if "write report" in line)
        assert ">" in selected
        assert "[ ]" in selected

    def test_completion_percentage(self, renderer, app):
        app.store.add("a")
        app.store.add("b")
        app.store.toggle(1)

        assert "50.0% Complete" in screen(renderer, app)

    def test_filter_without_matches(self, renderer, app):
        app.store.add("buy milk")
        app.store.set_filter("zzz")

        assert "No tasks match 'zzz'" in screen(renderer, app)

    def test_long_list_keeps_cursor_visible(self, renderer, app):
        for n in range(60):
            app.store.add(f"task {n:02d}")

        output = screen(renderer, app)

        assert "task 59" in output
        assert "task 00" not in output

    def test_window_scrolls_back_up(self, renderer, app):
        for n in range(60):
            app.store.add(f"task {n:02d}")
        app.store.cursor = 0

        output = screen(renderer, app)

        assert "task 00" in output
        assert "task 59" not in output


class TestInputPanel:
    """Test the input line."""

    @pytest.mark.parametrize(
        "mode,prompt",
        [
            (Mode.ADDING, "New Task:"),
            (Mode.FILTERING, "Filter:"),
            (Mode.EDITING, "Edit Task:"),
            (Mode.CONFIRM_RESET, "Reset all tasks? (y/n)"),
        ],
    )
    def test_prompts(self, renderer, app, mode, prompt):
        app.mode = mode
        assert prompt in screen(renderer, app)

    def test_buffer_shown(self, renderer, app):
        app.mode = Mode.ADDING
        app.buffer = "buy mi"

        assert "New Task: buy mi" in screen(renderer, app)

    def test_no_prompt_while_browsing(self, renderer, app):
        output = screen(renderer, app)
        assert "New Task:" not in output
        assert "Filter:" not in output


class TestStatusPanel:
    """Test the status line."""

    def test_status_text(self, renderer, app):
        app.set_status("Task added.")
        assert "Task added." in screen(renderer, app)

    def test_expired_status_hidden(self, renderer, app):
        app.config.status_timeout = 0.5
        app.set_status("gone soon")
        app.status.created_at = app.status.created_at.replace(year=2000)

        assert "gone soon" not in screen(renderer, app)

    def test_status_styles(self, renderer):
        assert renderer._get_status_style(StatusLevel.INFO) == "green"
        assert renderer._get_status_style(StatusLevel.WARNING) == "yellow"
        assert renderer._get_status_style(StatusLevel.ERROR) == "bold red"
