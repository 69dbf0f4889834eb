"""Non-fatal configuration checks reported as warnings."""

import warnings
from typing import Any, Dict, List

from rolewatch.matching.text import normalize

from .duration import DurationParseError, parse_duration

# Valid intervals below this get a rate-limit warning
SHORT_INTERVAL_SECONDS = 600


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Inspect a raw configuration dict for likely mistakes.

    Args:
        config_dict: Raw configuration dictionary (before validation)

    Returns:
        List of warning messages
    """
    messages = []

    scan_interval = config_dict.get("scan_interval", "30m")
    try:
        interval_seconds = parse_duration(scan_interval) if isinstance(scan_interval, str) else None
    except DurationParseError:
        interval_seconds = None
    if interval_seconds is not None and interval_seconds < SHORT_INTERVAL_SECONDS:
        messages.append(f"Short scan_interval ({scan_interval}) may trigger board rate limits")

    profile = config_dict.get("profile") or {}
    if not isinstance(profile, dict):
        return messages

    queries = profile.get("role_queries") or []
    if isinstance(queries, list):
        normalized = [normalize(q) for q in queries if isinstance(q, str)]
        duplicates = sorted({q for q in normalized if q and normalized.count(q) > 1})
        if duplicates:
            messages.append(
                f"Duplicate role queries will be collapsed: {', '.join(duplicates)}"
            )

    companies = profile.get("companies") or []
    if isinstance(companies, list):
        for company in companies:
            if not isinstance(company, dict):
                continue
            if company.get("provider") == "custom" or not company.get("board_slug"):
                name = company.get("name", company.get("id", "Unknown"))
                messages.append(
                    f"Company '{name}' has no job board and will be shown as a link only"
                )

    return messages


def emit_warnings(messages: List[str]) -> None:
    """Emit each message as a UserWarning."""
    for message in messages:
        warnings.warn(message, UserWarning, stacklevel=2)
