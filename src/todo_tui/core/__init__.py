"""Core task store and configuration for todo."""
