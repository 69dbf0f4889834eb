"""Duration parsing for the scan interval setting."""

import re

_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

_ISO_PATTERN = re.compile(r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$")
_HUMAN_PART = re.compile(r"(\d+)\s*([smhd])")


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed."""


def parse_duration(duration_str: str) -> int:
    """
    Parse a duration string to seconds.

    Supports human-readable forms ("30m", "1h30m", "2d") and ISO-8601
    durations ("PT30M", "PT1H", "P1D").

    Args:
        duration_str: Duration string to parse

    Returns:
        Duration in seconds

    Raises:
        DurationParseError: If the duration string is invalid or zero

    Examples:
        >>> parse_duration("30m")
        1800
        >>> parse_duration("PT1H")
        3600
    """
    text = (duration_str or "").strip()
    if not text:
        raise DurationParseError("Duration string cannot be empty")

    if text.upper().startswith("P"):
        total = _parse_iso8601(text.upper())
    else:
        total = _parse_human(text.lower())

    if total == 0:
        raise DurationParseError(f"Duration cannot be zero: '{duration_str}'")
    return total


def _parse_iso8601(text: str) -> int:
    match = _ISO_PATTERN.match(text)
    if not match or text in ("P", "PT"):
        raise DurationParseError(
            f"Invalid ISO-8601 duration format: '{text}'. "
            "Expected format like 'P1D', 'PT1H30M', or 'PT30M'"
        )

    days, hours, minutes, seconds = match.groups()
    return (
        int(days or 0) * _UNIT_SECONDS["d"]
        + int(hours or 0) * _UNIT_SECONDS["h"]
        + int(minutes or 0) * _UNIT_SECONDS["m"]
        + int(float(seconds or 0))
    )


def _parse_human(text: str) -> int:
    parts = _HUMAN_PART.findall(text)
    if not parts:
        raise DurationParseError(
            f"Invalid duration format: '{text}'. "
            "Expected format like '30m', '1h', '2d', or combinations like '1h30m'"
        )

    # Every character must belong to a number+unit pair
    if "".join(f"{num}{unit}" for num, unit in parts) != re.sub(r"\s+", "", text):
        raise DurationParseError(
            f"Invalid characters in duration: '{text}'. "
            "Use only digits and units: s, m, h, d"
        )

    return sum(int(num) * _UNIT_SECONDS[unit] for num, unit in parts)


def validate_duration_range(
    duration_seconds: int,
    min_seconds: int = 300,
    max_seconds: int = 86400,
) -> None:
    """
    Validate that a duration is within an acceptable range.

    Raises:
        DurationParseError: If duration is outside [min_seconds, max_seconds]
    """
    if duration_seconds < min_seconds:
        raise DurationParseError(
            f"Scan interval too short: {_humanize(duration_seconds)}. "
            f"Minimum is {_humanize(min_seconds)}."
        )
    if duration_seconds > max_seconds:
        raise DurationParseError(
            f"Scan interval too long: {_humanize(duration_seconds)}. "
            f"Maximum is {_humanize(max_seconds)}."
        )


def _humanize(seconds: int) -> str:
    for unit, label in ((86400, "day"), (3600, "hour"), (60, "minute")):
        if seconds >= unit:
            count = seconds // unit
            return f"{count} {label}{'s' if count != 1 else ''}"
    return f"{seconds} second{'s' if seconds != 1 else ''}"
