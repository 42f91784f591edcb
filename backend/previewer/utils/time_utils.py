# backend/previewer/utils/time_utils.py
"""
Time utilities.

Timestamps supplied by callers are normalised to integer UNIX seconds so that
asset identifiers derived from them are stable across runs and hosts.
"""

import time
from datetime import datetime, timezone
from typing import Union

# Constant for UTC timezone to avoid hardcoded timezone.utc references
UTC_TIMEZONE = timezone.utc


def to_unix_seconds(value: Union[datetime, int, float, str]) -> int:
    """
    Convert a caller-supplied timestamp to whole UNIX seconds.

    Naive datetimes are interpreted as UTC, never as host local time.

    Args:
        value: datetime, numeric timestamp, or numeric / ISO 8601 string

    Returns:
        Non-negative integer seconds since the epoch

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, bool):
        raise ValueError("Timestamp must not be a boolean")

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC_TIMEZONE)
        seconds = int(value.timestamp())
    elif isinstance(value, (int, float)):
        seconds = int(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            seconds = int(float(text))
        except ValueError:
            return to_unix_seconds(datetime.fromisoformat(text))
    else:
        raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")

    if seconds < 0:
        raise ValueError(f"Timestamp must not be negative: {value}")
    return seconds


def elapsed_ms(start: float) -> int:
    """Milliseconds elapsed since a time.perf_counter() reading"""
    return int((time.perf_counter() - start) * 1000)
