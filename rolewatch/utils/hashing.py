"""Hashing utilities for stable job identity and change detection.

This module provides:
- compute_stable_id: join key for a posting across repeated fetches
- compute_content_hash: cheap fingerprint of the displayed job content
"""

from typing import Optional

# 32-bit unsigned wraparound for the polynomial hash
_HASH_MASK = 0xFFFFFFFF


def compute_stable_id(
    provider: str,
    company_id: str,
    provider_id: Optional[str],
    local_id: Optional[str] = None,
) -> str:
    """Compute the stable identifier of a posting.

    The provider-assigned id is used as-is when present. Otherwise a fallback
    of the form ``{provider}:{company_id}:{local_id}`` is synthesized so that the
    same posting keeps the same id across refreshes.

    Args:
        provider: Board provider (greenhouse, lever)
        company_id: Tracked company identifier
        provider_id: Id assigned by the provider, if any
        local_id: Provider-local identifier used for the fallback

    Returns:
        Stable job identifier

    Example:
        >>> compute_stable_id("greenhouse", "stripe", "4012345")
        '4012345'
        >>> compute_stable_id("greenhouse", "stripe", None, "req-77")
        'greenhouse:stripe:req-77'
    """
    if provider_id is not None and str(provider_id).strip():
        return str(provider_id).strip()
    return f"{provider}:{company_id}:{local_id or ''}"


def compute_content_hash(title: Optional[str], location: Optional[str], url: Optional[str]) -> str:
    """Compute a content hash for change detection.

    Base-31 polynomial accumulation over ``title|location|url`` with 32-bit
    wraparound. Volatile fields (fetch and provider-update timestamps) are
    excluded so equal hashes mean "same displayed content". Not collision
    resistant; only used to notice edits.

    Args:
        title: Job title
        location: Job location
        url: Job posting URL

    Returns:
        Decimal string of the unsigned 32-bit hash

    Example:
        >>> compute_content_hash("a", "", "") == compute_content_hash("a", None, None)
        True
    """
    composite = f"{title or ''}|{location or ''}|{url or ''}"

    value = 0
    for char in composite:
        value = (value * 31 + ord(char)) & _HASH_MASK

    return str(value)
