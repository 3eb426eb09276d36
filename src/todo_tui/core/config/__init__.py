"""
Configuration models and loading.

This module provides the Pydantic model for todo configuration
with multi-layer merging: defaults < user < env vars < command line.
"""

from .env import get_user_env_path, load_user_env
from .loader import (
    clear_cache,
    get_log_dir,
    get_user_config_path,
    get_xdg_config_home,
    get_xdg_data_home,
    load_config,
)
from .models import TodoConfig

__all__ = [
    # Models
    "TodoConfig",
    # Loader functions
    "clear_cache",
    "get_log_dir",
    "get_user_env_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "get_xdg_data_home",
    "load_config",
    "load_user_env",
]
