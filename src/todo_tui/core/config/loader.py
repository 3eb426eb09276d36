"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < env vars < command line overrides
"""

import json
import os
from pathlib import Path
from typing import Any

from .models import TodoConfig

# Global cache to avoid reloading config multiple times per session
_config_cache: TodoConfig | None = None

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_xdg_data_home() -> Path:
    """
    Get XDG data home directory.

    Returns:
        Path to data directory (defaults to ~/.local/share)
    """
    if xdg_home := os.environ.get("XDG_DATA_HOME"):
        return Path(xdg_home)
    return Path.home() / ".local" / "share"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/todo/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "todo" / "config.json"


def get_log_dir() -> Path:
    """Directory for the debug log and the activity log."""
    return get_xdg_data_home() / "todo" / "logs"


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            print(f"Warning: Config at {path} must be a JSON object, ignoring")
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config problems should never stop the list from opening
        print(f"Warning: Failed to parse config at {path}: {e}")
        return None


def _parse_bool(name: str, raw: str) -> bool | None:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    print(f"Warning: Invalid {name} value '{raw}', ignoring")
    return None


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        TODO_FILE - overrides data_file
        TODO_BACKUP_DIR - overrides backup_dir
        TODO_AUTOSAVE - overrides autosave
        TODO_STATUS_TIMEOUT - overrides status_timeout
        TODO_ACTIVITY_LOG - overrides activity_log

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if data_file := os.environ.get("TODO_FILE"):
        result["data_file"] = data_file

    if backup_dir := os.environ.get("TODO_BACKUP_DIR"):
        result["backup_dir"] = backup_dir

    if (autosave_str := os.environ.get("TODO_AUTOSAVE")) is not None:
        autosave = _parse_bool("TODO_AUTOSAVE", autosave_str)
        if autosave is not None:
            result["autosave"] = autosave

    if timeout_str := os.environ.get("TODO_STATUS_TIMEOUT"):
        try:
            timeout = float(timeout_str)
            if timeout < 0:
                print(f"Warning: TODO_STATUS_TIMEOUT must be >= 0, got {timeout}, ignoring")
            else:
                result["status_timeout"] = timeout
        except ValueError:
            print(f"Warning: Invalid TODO_STATUS_TIMEOUT value '{timeout_str}', ignoring")

    if (activity_str := os.environ.get("TODO_ACTIVITY_LOG")) is not None:
        activity = _parse_bool("TODO_ACTIVITY_LOG", activity_str)
        if activity is not None:
            result["activity_log"] = activity

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "data_file": str(Path.home() / "todo.json"),
        "autosave": False,
        "status_timeout": 3.0,
        "confirm_reset": True,
        "activity_log": True,
    }


def load_config(overrides: dict[str, Any] | None = None, use_cache: bool = True) -> TodoConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Explicit overrides (command line options)
        2. Environment variables (TODO_*)
        3. User config (~/.config/todo/config.json)
        4. Hardcoded defaults

    Args:
        overrides: Values that win over every other layer; None values are skipped
        use_cache: If True, return cached config from previous load

    Returns:
        Validated TodoConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation

    Example:
        >>> config = load_config()
        >>> config.status_timeout
        3.0
    """
    global _config_cache

    explicit = {k: v for k, v in (overrides or {}).items() if v is not None}

    if use_cache and not explicit and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged.update(user_config)

    merged = apply_env_overrides(merged)
    merged.update(explicit)

    config = TodoConfig(**merged)

    if not explicit:
        _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
