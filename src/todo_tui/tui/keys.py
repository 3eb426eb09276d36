"""
Keyboard input.

prompt_toolkit owns the terminal input: its VT100 parser turns the raw
byte stream into KeyPress values, including escape sequences and UTF-8.
``keys_from_press`` narrows those to the handful of Key values the
interface reacts to, and ``KeyReader`` waits for input with an optional
timeout so the loop can wake up to redraw.
"""

import select
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum

from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys

# How long an ESC may sit in the parser before it is taken as the Escape key.
ESCAPE_TIMEOUT = 0.05


class KeyName(str, Enum):
    """Kinds of key the interface distinguishes."""

    CHAR = "char"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    CONTROL = "control"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Key:
    """
    A decoded key press.

    ``char`` holds the typed character for CHAR keys and the letter for
    CONTROL keys (``Key(KeyName.CONTROL, "D")`` is Ctrl-D).
    """

    name: KeyName
    char: str = ""

    @classmethod
    def of(cls, char: str) -> "Key":
        """Shorthand for a printable character key."""
        return cls(KeyName.CHAR, char)

    @property
    def is_printable(self) -> bool:
        return self.name == KeyName.CHAR and self.char.isprintable()


# Keys.Enter is Keys.ControlM and Keys.Backspace is Keys.ControlH.
_NAMED_KEYS: dict[Keys, KeyName] = {
    Keys.Enter: KeyName.ENTER,
    Keys.ControlJ: KeyName.ENTER,
    Keys.Escape: KeyName.ESCAPE,
    Keys.Backspace: KeyName.BACKSPACE,
    Keys.Up: KeyName.UP,
    Keys.Down: KeyName.DOWN,
    Keys.Left: KeyName.LEFT,
    Keys.Right: KeyName.RIGHT,
}

_IGNORED_KEYS = {Keys.Ignore, Keys.CPRResponse}


def keys_from_press(press: KeyPress) -> list[Key]:
    """
    Translate one prompt_toolkit key press.

    A bracketed paste expands to one CHAR key per printable character;
    terminal replies such as cursor position reports produce nothing.

    Example:
        >>> keys_from_press(KeyPress(Keys.Up, "\\x1b[A"))
        [Key(name=<KeyName.UP: 'up'>, char='')]
    """
    key = press.key
    if not isinstance(key, Keys):
        return [Key(KeyName.CHAR, key)] if len(key) == 1 else [Key(KeyName.UNKNOWN)]
    if key in _NAMED_KEYS:
        return [Key(_NAMED_KEYS[key])]
    if key == Keys.BracketedPaste:
        return [Key.of(c) for c in press.data if c.isprintable()]
    if key in _IGNORED_KEYS:
        return []
    # Control keys are named "c-a" through "c-z".
    if key.value.startswith("c-") and len(key.value) == 3:
        return [Key(KeyName.CONTROL, key.value[-1].upper())]
    return [Key(KeyName.UNKNOWN)]


class KeyReader:
    """
    Key reader over a prompt_toolkit Input.

    The input should already be in raw mode (see ``terminal.terminal_session``).
    ``read()`` blocks until a key arrives or the timeout passes.
    """

    def __init__(self, terminal_input: Input, escape_timeout: float = ESCAPE_TIMEOUT):
        self.input = terminal_input
        self.escape_timeout = escape_timeout
        self._pending: deque[Key] = deque()

    def raw_mode(self):
        return self.input.raw_mode()

    def _wait(self, timeout: float | None) -> bool:
        ready, _, _ = select.select([self.input.fileno()], [], [], timeout)
        return bool(ready)

    def _queue(self, presses: list[KeyPress]) -> None:
        for press in presses:
            self._pending.extend(keys_from_press(press))

    def read(self, timeout: float | None = None) -> Key | None:
        """
        Read the next key.

        Args:
            timeout: Seconds to wait for input, or None to wait forever

        Returns:
            The key, or None if the timeout passed without one

        Raises:
            EOFError: If the input stream is closed
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self._pending:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            if not self._wait(remaining):
                return None
            self._queue(self.input.read_keys())
            if self._pending:
                break
            if self.input.closed:
                raise EOFError("Input stream closed")
            # The parser holds a lone ESC until it knows no sequence follows.
            if not self._wait(self.escape_timeout):
                self._queue(self.input.flush_keys())
        return self._pending.popleft()
