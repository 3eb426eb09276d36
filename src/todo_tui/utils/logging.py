"""
Structured JSONL activity logging for todo.

Provides an ActivityLog class that writes timestamped JSON Lines events for
every change made through the interface. Events are written to
~/.local/share/todo/logs/activity.jsonl

Each log line is valid JSON with the format:
{
  "timestamp": "2026-01-15T12:34:56.789Z",
  "event_type": "task_added",
  "data": { ... event-specific data ... }
}
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from todo_tui.core.config.loader import get_log_dir

logger = logging.getLogger(__name__)

ACTIVITY_LOG_NAME = "activity.jsonl"
DEBUG_LOG_NAME = "todo.log"


class EventType(str, Enum):
    """Types of events that can be logged."""

    SESSION_START = "session_start"
    SESSION_END = "session_end"
    TASK_ADDED = "task_added"
    TASK_TOGGLED = "task_toggled"
    TASK_EDITED = "task_edited"
    TASK_DELETED = "task_deleted"
    DONE_REMOVED = "done_removed"
    BACKUP = "backup"
    RESET = "reset"
    ERROR = "error"


class LogEntry(BaseModel):
    """A single structured log entry in JSONL format."""

    model_config = ConfigDict(use_enum_values=True)

    timestamp: datetime = Field(..., description="When the event occurred (ISO 8601 format)")
    event_type: EventType = Field(..., description="Type of event")
    data: dict[str, Any] = Field(default_factory=dict, description="Event-specific data")


class ActivityLog:
    """
    Structured JSONL logger for task activity.

    A disabled log accepts every call and writes nothing, so callers never
    need to check whether logging is on.

    Example:
        log = ActivityLog.init()
        log.log_event(EventType.TASK_ADDED, {"task_id": 1, "text": "buy milk"})
    """

    def __init__(self, log_file: Path | None):
        """
        Initialize logger with a log file path.

        Args:
            log_file: Path to the JSONL log file (created if needed), or None
                to disable logging
        """
        self.log_file = Path(log_file) if log_file is not None else None
        if self.log_file is not None:
            self._ensure_log_dir()

    def _ensure_log_dir(self) -> None:
        """Create log directory if it doesn't exist."""
        if self.log_file is None:
            return
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Activity log disabled, cannot create %s: %s", self.log_file.parent, e)
            self.log_file = None

    @staticmethod
    def init(enabled: bool = True) -> "ActivityLog":
        """
        Create the activity log in its standard location.

        Logs are written to ~/.local/share/todo/logs/activity.jsonl

        Args:
            enabled: If False, return a log that discards all events
        """
        if not enabled:
            return ActivityLog(None)
        return ActivityLog(get_log_dir() / ACTIVITY_LOG_NAME)

    @property
    def enabled(self) -> bool:
        return self.log_file is not None

    def log_event(self, event_type: EventType, data: dict[str, Any] | None = None) -> None:
        """
        Append an event to the JSONL file.

        Write failures are reported through the standard logger and never
        raised, so activity logging can't interrupt the interface.

        Args:
            event_type: Type of event (from EventType enum)
            data: Event-specific data (optional, defaults to {})
        """
        if self.log_file is None:
            return

        entry = LogEntry(
            timestamp=datetime.now(timezone.utc), event_type=event_type, data=data or {}
        )
        log_line = entry.model_dump_json(exclude_none=True, by_alias=False) + "\n"

        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(log_line)
        except OSError as e:
            logger.warning("Failed to write activity log %s: %s", self.log_file, e)

    def log_error(self, message: str, context: dict[str, Any] | None = None) -> None:
        """
        Log an error event.

        Args:
            message: Error message
            context: Additional error context (optional)
        """
        data: dict[str, Any] = {"message": message}
        if context:
            data["context"] = context

        self.log_event(EventType.ERROR, data)


def setup_logging(debug: bool = False, log_dir: Path | None = None) -> Path | None:
    """
    Configure standard logging for an interactive session.

    The interface owns the terminal, so records go to a file instead of
    stderr: everything at DEBUG with ``debug``, otherwise WARNING and up.

    Args:
        debug: If True, enable DEBUG level logging
        log_dir: Directory for todo.log (defaults to the XDG data directory)

    Returns:
        Path of the log file, or None if it could not be created
    """
    log_dir = log_dir or get_log_dir()
    log_file = log_dir / DEBUG_LOG_NAME
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        filename=str(log_file),
        encoding="utf-8",
    )
    return log_file
