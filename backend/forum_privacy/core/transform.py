"""
Value transforms applied to exported data.

Exported documents are meant to be read by the user, so booleans and
timestamps are rendered as text.
"""

from datetime import datetime, timezone
from typing import Any


def yesno(value: Any) -> str:
    """Render a truthy value as ``Yes`` or ``No``."""
    return "Yes" if value else "No"


def format_datetime(value: datetime | None) -> str | None:
    """Render a timestamp as ISO 8601 text."""
    if value is None:
        return None
    return value.isoformat(sep=" ", timespec="seconds")


def epoch(value: datetime) -> int:
    """Seconds since the epoch, for use in labels. Naive values are UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())
