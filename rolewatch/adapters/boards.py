"""Parsing of user-entered board identifiers."""

import re
from typing import Optional
from urllib.parse import urlparse

_SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$", re.IGNORECASE)


def slug_from_board_input(text: Optional[str]) -> Optional[str]:
    """Extract a Greenhouse board slug from a bare slug or a board URL.

    Accepted forms:
    - stripe
    - https://boards.greenhouse.io/stripe
    - https://boards.greenhouse.io/stripe/jobs/123
    - https://boards-api.greenhouse.io/v1/boards/stripe/jobs

    Args:
        text: User input

    Returns:
        Lowercased slug, or None when the input is not a recognizable board
    """
    value = (text or "").strip()
    if not value:
        return None

    if _SLUG_PATTERN.match(value) and "http" not in value.lower():
        return value.lower()

    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or "greenhouse.io" not in (parsed.hostname or ""):
        return None

    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) >= 3 and parts[0] == "v1" and parts[1] == "boards":
        return parts[2].lower()
    if parts:
        return parts[0].lower()
    return None


def titleize_slug(slug: Optional[str]) -> str:
    """Turn ``"foo-bar"`` into ``"Foo Bar"``."""
    return " ".join(part[:1].upper() + part[1:] for part in (slug or "").split("-"))
