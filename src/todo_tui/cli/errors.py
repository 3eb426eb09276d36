"""
Error reporting and exit codes for the todo command.

Errors are printed after the interactive screen has closed, with a short
hint on how to fix them.
"""

from enum import IntEnum

from rich.console import Console

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Exit codes of the todo command."""

    SUCCESS = 0
    """Tasks saved and the session ended normally."""

    GENERAL_ERROR = 1
    """Terminal unavailable, data file unreadable, or final save failed."""

    USER_ERROR = 2
    """Invalid configuration (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Cannot start the interface",
        ...     reason="Standard input is not a terminal",
        ...     solution="run todo from an interactive shell",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_save_failed_error(path: str, reason: str) -> None:
    """Print error when tasks could not be written on exit."""
    print_error(
        f"Tasks were not saved to {path}",
        reason=reason,
        solution="check free space and permissions, or use --file to pick another location",
    )


def print_config_error(reason: str) -> None:
    """Print error when the merged configuration is invalid."""
    print_error(
        "Invalid configuration",
        reason=reason,
        solution="check ~/.config/todo/config.json and TODO_* environment variables",
    )


__all__ = [
    "ExitCode",
    "print_config_error",
    "print_error",
    "print_save_failed_error",
]
