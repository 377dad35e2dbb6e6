"""Timestamp utilities for UTC handling and datetime parsing.

Listings, demand profiles and notification records all carry UTC timestamps.
This module keeps the conversions in one place:
- Getting current UTC time
- Coercing naive or foreign-zone datetimes to UTC
- Parsing ISO 8601 strings (including date-only values such as "2024-01-01")
- Formatting timestamps for storage and display
"""

from datetime import datetime, timezone
from typing import Optional

STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    If the datetime is timezone-naive, it's treated as UTC.
    If the datetime has a different timezone, it's converted to UTC.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None

    Example:
        >>> naive = datetime(2024, 2, 1, 12, 0, 0)
        >>> ensure_utc(naive).tzinfo == timezone.utc
        True
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_iso_datetime(iso_string: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 datetime string to UTC datetime.

    Supports:
    - 2024-02-01T12:00:00Z
    - 2024-02-01T12:00:00+00:00
    - 2024-02-01T12:00:00.123456Z
    - 2024-02-01

    Args:
        iso_string: ISO 8601 formatted datetime string

    Returns:
        Timezone-aware datetime in UTC, or None if parsing fails
    """
    if not iso_string or not iso_string.strip():
        return None

    cleaned = iso_string.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(cleaned))
    except ValueError:
        pass

    try:
        return ensure_utc(datetime.strptime(iso_string.strip(), "%Y-%m-%d"))
    except ValueError:
        return None


def format_timestamp(dt: Optional[datetime], include_microseconds: bool = False) -> str:
    """Format a datetime as ISO 8601 string in UTC.

    Args:
        dt: Datetime to format
        include_microseconds: Whether to include microseconds in output

    Returns:
        ISO 8601 formatted string with 'Z' suffix, or "" for None

    Example:
        >>> format_timestamp(datetime(2024, 2, 1, 12, 0, 0, tzinfo=timezone.utc))
        '2024-02-01T12:00:00Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""

    if include_microseconds:
        return dt_utc.strftime(STORAGE_FORMAT)
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%SZ")


def to_storage(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime for database storage (lexicographically sortable)."""
    if dt is None:
        return None
    return format_timestamp(dt, include_microseconds=True)


def from_storage(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored timestamp written by :func:`to_storage`."""
    if not value:
        return None
    return parse_iso_datetime(value)
