"""
Todo CLI - Main application entry point.

This module sets up the Typer CLI application. There are no subcommands:
``todo`` loads the task file and opens the interactive view.
"""

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from todo_tui import __version__
from todo_tui.cli.errors import (
    ExitCode,
    print_config_error,
    print_error,
    print_save_failed_error,
)
from todo_tui.core.config.env import load_user_env
from todo_tui.core.config.loader import load_config
from todo_tui.core.tasks.exceptions import StorageError
from todo_tui.core.tasks.store import TaskStore
from todo_tui.tui.app import TodoApp
from todo_tui.tui.renderer import TodoRenderer
from todo_tui.tui.terminal import TerminalError, run_app
from todo_tui.utils.logging import ActivityLog, setup_logging

logger = logging.getLogger(__name__)

# Create the main Typer app
app = typer.Typer(
    name="todo",
    help="Keyboard-driven todo list for the terminal",
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        console.print(f"todo version {__version__}")
        raise typer.Exit(ExitCode.SUCCESS)


@app.command()
def main(
    file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        help="Task file to open (default: ~/todo.json)",
    ),
    backup_dir: Path | None = typer.Option(
        None,
        "--backup-dir",
        help="Directory for backups (default: next to the task file)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Write detailed logs to the todo log file",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Open the todo list.

    Keys:
        j/k       move the cursor
        space     toggle the current task
        o         add a task
        i         edit the current task
        /         filter the list, then n/N to jump between matches
        d / D     delete the current task / remove completed tasks
        b / r     back up / reset (after a backup)
        q         save and quit
    """
    load_user_env()
    log_file = setup_logging(debug=debug)
    if debug and log_file is not None:
        console.print(f"[dim]Debug log: {log_file}[/dim]")

    try:
        config = load_config({"data_file": file, "backup_dir": backup_dir})
    except ValidationError as e:
        print_config_error(str(e))
        raise typer.Exit(ExitCode.USER_ERROR) from e

    store = TaskStore(config.data_file, backup_dir=config.backup_dir)
    try:
        result = store.load()
    except StorageError as e:
        print_error(
            f"Cannot read {config.data_file}",
            reason=str(e),
            solution="check the file permissions, or use --file to pick another location",
        )
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e

    activity = ActivityLog.init(enabled=config.activity_log)
    todo = TodoApp(store, config=config, activity=activity)
    todo.report_load(result)

    try:
        run_app(todo, TodoRenderer(console), console)
    except TerminalError as e:
        print_error(
            "Cannot start the interactive view",
            reason=str(e),
            solution="run todo from an interactive terminal",
        )
        raise typer.Exit(ExitCode.GENERAL_ERROR) from e
    except KeyboardInterrupt:
        todo.quit(force=True)
        raise typer.Exit(ExitCode.SIGINT)

    if todo.save_error is not None:
        print_save_failed_error(str(config.data_file), str(todo.save_error))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    logger.info("Session ended, %d tasks saved to %s", len(store), config.data_file)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
