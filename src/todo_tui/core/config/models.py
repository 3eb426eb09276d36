"""
Configuration data models for todo.

These models define the structure of ~/.config/todo/config.json,
with validation and type safety via Pydantic.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


def default_data_file() -> Path:
    """Default location of the task list."""
    return Path.home() / "todo.json"


class TodoConfig(BaseModel):
    """
    Settings for the interactive todo list.

    Example:
        >>> config = TodoConfig(data_file="~/notes/todo.json")
        >>> config.resolved_backup_dir == config.data_file.parent
        True
    """

    model_config = ConfigDict(extra="ignore")

    data_file: Path = Field(
        default_factory=default_data_file,
        description="Primary state file holding all tasks",
    )
    backup_dir: Path | None = Field(
        default=None,
        description="Directory for backup snapshots (defaults to the data file's directory)",
    )
    autosave: bool = Field(
        default=False,
        description="Save after every change instead of only on backup, reset and quit",
    )
    status_timeout: float = Field(
        default=3.0,
        ge=0.0,
        description="Seconds a status line message stays visible (0 keeps it until replaced)",
    )
    confirm_reset: bool = Field(
        default=True,
        description="Ask for y/n confirmation before resetting the list",
    )
    activity_log: bool = Field(
        default=True,
        description="Record task activity as JSON Lines under the data directory",
    )

    @field_validator("data_file", "backup_dir", mode="before")
    @classmethod
    def expand_user(cls, v: object) -> object:
        """Expand ~ in configured paths."""
        if isinstance(v, (str, Path)):
            return Path(v).expanduser()
        return v

    @property
    def resolved_backup_dir(self) -> Path:
        return self.backup_dir or self.data_file.parent
