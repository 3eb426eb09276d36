"""Utility modules for todo."""

from .logging import ActivityLog, EventType, LogEntry, setup_logging

__all__ = [
    "ActivityLog",
    "EventType",
    "LogEntry",
    "setup_logging",
]
