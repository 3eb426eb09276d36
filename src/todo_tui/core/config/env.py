"""
User .env file support.

``~/.config/todo/.env`` (under XDG_CONFIG_HOME) may hold TODO_* settings
for people who would rather not export them from their shell profile.
Only that one per-user file is read: a .env in whatever directory todo
happens to be started from is never consulted, so a project's .env cannot
redirect the task file.
"""

import logging
import os
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_xdg_config_home

logger = logging.getLogger(__name__)

ENV_PREFIX = "TODO_"


def get_user_env_path() -> Path:
    """Get the path of the user .env file."""
    return get_xdg_config_home() / "todo" / ".env"


def load_user_env(path: Path | None = None) -> dict[str, str]:
    """
    Copy TODO_* settings from the user .env file into os.environ.

    Variables already set in the environment are left alone; other keys in
    the file are skipped with a warning.

    Args:
        path: File to read (defaults to the user .env file)

    Returns:
        The variables that were set
    """
    if path is None:
        path = get_user_env_path()
    if not path.exists():
        return {}

    applied: dict[str, str] = {}
    for key, value in dotenv_values(path).items():
        if value is None:
            continue
        if not key.startswith(ENV_PREFIX):
            logger.warning("Ignoring %s in %s: only %s* settings are read", key, path, ENV_PREFIX)
            continue
        if key in os.environ:
            continue
        os.environ[key] = value
        applied[key] = value

    if applied:
        logger.debug("Loaded %s from %s", ", ".join(sorted(applied)), path)
    return applied
