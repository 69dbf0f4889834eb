"""Timestamp utilities for UTC handling and provider date parsing.

Job boards report dates in several shapes: ISO 8601 strings, Unix seconds,
or Unix milliseconds (sometimes as digit strings). Everything entering the
core is converted to a timezone-aware UTC datetime here, or to None when the
value cannot be understood.
"""

from datetime import datetime, timezone
from typing import Any, Optional

# Epoch values above this are milliseconds rather than seconds
_EPOCH_MS_THRESHOLD = 1e12


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_iso_datetime(iso_string: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 datetime string to UTC datetime.

    Supports:
    - 2025-11-04T12:00:00Z
    - 2025-11-04T12:00:00.123-05:00
    - 2025-11-04T12:00:00
    - 2025-11-04

    Args:
        iso_string: ISO 8601 formatted datetime string

    Returns:
        Timezone-aware datetime in UTC, or None if parsing fails
    """
    if not iso_string or not iso_string.strip():
        return None

    cleaned = iso_string.strip()
    # fromisoformat on older interpreters rejects the 'Z' suffix
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(cleaned))
    except ValueError:
        pass

    for fmt in ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"):
        try:
            return ensure_utc(datetime.strptime(iso_string.strip(), fmt))
        except ValueError:
            continue

    return None


def _from_epoch(value: float) -> Optional[datetime]:
    seconds = value / 1000 if value > _EPOCH_MS_THRESHOLD else value
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_provider_date(value: Any) -> Optional[datetime]:
    """Parse a date in any shape a job board may send.

    Accepts datetimes, ISO 8601 strings, and Unix epoch values in seconds or
    milliseconds, either as numbers or as digit strings.

    Args:
        value: Raw date value from a provider payload

    Returns:
        Timezone-aware UTC datetime, or None when missing or unparseable

    Example:
        >>> parse_provider_date(1730721600000).year
        2024
        >>> parse_provider_date("not a date") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, (int, float)):
        return _from_epoch(float(value))

    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isascii() and stripped.isdigit():
            return _from_epoch(float(stripped))
        return parse_iso_datetime(stripped)

    return None


def format_timestamp(dt: Optional[datetime]) -> str:
    """Format a datetime as ISO 8601 string in UTC with 'Z' suffix.

    Args:
        dt: Datetime to format

    Returns:
        e.g. '2025-11-04T12:00:00Z', or an empty string for None
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%SZ")


def days_since(dt: Optional[datetime], now: Optional[datetime] = None) -> Optional[float]:
    """Return the number of (fractional) days between dt and now.

    Args:
        dt: Earlier instant (None allowed)
        now: Reference instant, defaults to utc_now()

    Returns:
        Days elapsed, negative if dt is in the future, or None if dt is None
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return None
    reference = ensure_utc(now) if now is not None else utc_now()
    return (reference - dt_utc).total_seconds() / 86400
