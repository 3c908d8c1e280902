"""Utility functions for the application."""

from datetime import datetime


def format_uptime(ms: int) -> str:
    """Render a duration in milliseconds as e.g. ``1d 2h 3m`` or ``4m 5s``."""
    seconds = ms // 1000
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"{days}d {hours % 24}h {minutes % 60}m"
    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"


def format_timestamp(value: datetime | None, default: str = "N/A") -> str:
    """ISO8601 rendering of an optional timestamp."""
    if value is None:
        return default
    return value.isoformat(timespec="seconds")
