"""Text normalization shared by titles and role queries."""

import re
from typing import List, Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Whole-token abbreviations only; "swe" inside "swedish" is left alone
ABBREVIATIONS = {
    "swe": "software engineer",
    "sde": "software engineer",
    "ml": "machine learning",
}

_ABBREVIATION_PATTERN = re.compile(r"\b(" + "|".join(map(re.escape, ABBREVIATIONS)) + r")\b")


def normalize(text: Optional[str]) -> str:
    """Lowercase, collapse every non-alphanumeric run to one space, and trim.

    Idempotent: ``normalize(normalize(s)) == normalize(s)``.

    Example:
        >>> normalize("  A-B  ")
        'a b'
    """
    if not text:
        return ""
    return _NON_ALNUM.sub(" ", str(text).lower()).strip()


def expand_abbreviations(normalized: str) -> str:
    """Replace standalone abbreviations in an already-normalized string.

    Example:
        >>> expand_abbreviations("swe intern")
        'software engineer intern'
    """
    if not normalized:
        return ""
    return _ABBREVIATION_PATTERN.sub(lambda m: ABBREVIATIONS[m.group(1)], normalized)


def expand(text: Optional[str]) -> str:
    """Normalize then expand abbreviations."""
    return expand_abbreviations(normalize(text))


def tokenize(text: Optional[str]) -> List[str]:
    """Split the expanded form of text into non-empty tokens."""
    return [token for token in expand(text).split(" ") if token]
