"""
Key to command dispatch tables.

Every key the interface reacts to maps to a Command value. The tables here
are plain data: the app decides what a command does in its current mode.
"""

from enum import Enum

from .keys import Key, KeyName


class Command(str, Enum):
    """Commands understood by the interactive loop."""

    # Browsing
    MOVE_NEXT = "move_next"
    MOVE_PREV = "move_prev"
    TOGGLE = "toggle"
    START_ADD = "start_add"
    START_FILTER = "start_filter"
    START_EDIT = "start_edit"
    FIND_NEXT = "find_next"
    FIND_PREV = "find_prev"
    BACKUP = "backup"
    RESET = "reset"
    DELETE = "delete"
    REMOVE_DONE = "remove_done"
    HELP = "help"
    QUIT = "quit"

    # Any mode
    INTERRUPT = "interrupt"

    # Text entry
    INSERT = "insert"
    ERASE = "erase"
    SUBMIT = "submit"
    CANCEL = "cancel"

    # Confirmation prompt
    CONFIRM = "confirm"
    DECLINE = "decline"


BROWSE_KEYS: dict[str, Command] = {
    "j": Command.MOVE_NEXT,
    "k": Command.MOVE_PREV,
    " ": Command.TOGGLE,
    "o": Command.START_ADD,
    "/": Command.START_FILTER,
    "i": Command.START_EDIT,
    "n": Command.FIND_NEXT,
    "N": Command.FIND_PREV,
    "b": Command.BACKUP,
    "r": Command.RESET,
    "d": Command.DELETE,
    "D": Command.REMOVE_DONE,
    "?": Command.HELP,
    "q": Command.QUIT,
}

BROWSE_SPECIAL_KEYS: dict[KeyName, Command] = {
    KeyName.DOWN: Command.MOVE_NEXT,
    KeyName.UP: Command.MOVE_PREV,
}

ENTRY_SPECIAL_KEYS: dict[KeyName, Command] = {
    KeyName.ENTER: Command.SUBMIT,
    KeyName.ESCAPE: Command.CANCEL,
    KeyName.BACKSPACE: Command.ERASE,
}

GLOBAL_KEYS: dict[Key, Command] = {
    Key(KeyName.CONTROL, "C"): Command.INTERRUPT,
}

CONFIRM_KEYS: dict[str, Command] = {
    "y": Command.CONFIRM,
    "Y": Command.CONFIRM,
    "n": Command.DECLINE,
    "N": Command.DECLINE,
}

HELP_TEXT = (
    "j/k move  space toggle  o add  i edit  / filter  n/N search  "
    "d delete  D remove done  b backup  r reset  q quit"
)


def global_command(key: Key) -> Command | None:
    """Command for a key that means the same thing in every mode."""
    return GLOBAL_KEYS.get(key)


def browse_command(key: Key) -> Command | None:
    """Command for a key pressed while browsing the list."""
    if key.name == KeyName.CHAR:
        return BROWSE_KEYS.get(key.char)
    return BROWSE_SPECIAL_KEYS.get(key.name)


def entry_command(key: Key) -> Command | None:
    """Command for a key pressed while typing into the input line."""
    if key.is_printable:
        return Command.INSERT
    return ENTRY_SPECIAL_KEYS.get(key.name)


def confirm_command(key: Key) -> Command | None:
    """Command for a key pressed while a y/n question is open."""
    if key.name == KeyName.ESCAPE:
        return Command.DECLINE
    if key.name == KeyName.CHAR:
        return CONFIRM_KEYS.get(key.char)
    return None
