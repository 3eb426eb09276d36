"""
Interactive terminal interface.

Key decoding, the mode machine, the Rich renderer and the terminal loop.
"""

from .app import Mode, StatusLevel, StatusMessage, TodoApp
from .commands import Command
from .keys import Key, KeyName, KeyReader, keys_from_press
from .renderer import TodoRenderer
from .terminal import TerminalError, run_app

__all__ = [
    "Command",
    "Key",
    "KeyName",
    "KeyReader",
    "Mode",
    "StatusLevel",
    "StatusMessage",
    "TerminalError",
    "TodoApp",
    "TodoRenderer",
    "keys_from_press",
    "run_app",
]
