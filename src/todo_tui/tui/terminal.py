"""
Terminal session handling and the main loop.

prompt_toolkit puts stdin in raw mode and parses the keys; Rich's Live
display owns the alternate screen. Raw mode turns signals off, so Ctrl-C
arrives as a key and the app handles it like any other.
"""

import io
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from prompt_toolkit.input import create_input
from rich.console import Console, RenderableType
from rich.live import Live

from .app import TodoApp
from .keys import KeyReader
from .renderer import TodoRenderer

logger = logging.getLogger(__name__)


class TerminalError(Exception):
    """Raised when the terminal cannot be set up for interactive use."""


def open_key_reader() -> KeyReader:
    """
    Create a key reader on the process's terminal.

    Raises:
        TerminalError: If stdin is not a terminal
    """
    if not sys.stdin.isatty():
        raise TerminalError("Standard input is not a terminal")
    try:
        return KeyReader(create_input(sys.stdin))
    except io.UnsupportedOperation as e:
        raise TerminalError(f"Cannot read keys from the terminal: {e}") from e


@contextmanager
def terminal_session(
    console: Console, renderable: RenderableType, reader: KeyReader
) -> Iterator[Live]:
    """Enter the interactive screen with the reader's input in raw mode."""
    with reader.raw_mode():
        with Live(
            renderable,
            console=console,
            screen=True,
            auto_refresh=False,
            redirect_stdout=False,
            redirect_stderr=False,
        ) as live:
            yield live


def run_app(
    app: TodoApp,
    renderer: TodoRenderer,
    console: Console,
    reader: KeyReader | None = None,
) -> None:
    """
    Run the read-render loop until the app quits.

    While a status message is counting down, the wait for a key is cut
    short so the screen is redrawn the moment it expires. A closed input
    stream quits without waiting on a failed save.
    """
    reader = reader or open_key_reader()
    with terminal_session(console, renderer.render(app), reader) as live:
        while app.running:
            now = datetime.now()
            live.update(renderer.render(app, now), refresh=True)
            try:
                key = reader.read(timeout=app.status_time_left(now))
            except EOFError:
                logger.info("Input closed, quitting")
                app.quit(force=True)
                break
            if key is None:
                continue
            logger.debug("Key %s %r in mode %s", key.name.value, key.char, app.mode.value)
            app.handle_key(key)
