"""Utility functions for hashing and UTC time handling."""

from .hashing import compute_content_hash, compute_stable_id
from .timestamps import (
    days_since,
    ensure_utc,
    format_timestamp,
    parse_iso_datetime,
    parse_provider_date,
    utc_now,
)

__all__ = [
    # Hashing
    "compute_content_hash",
    "compute_stable_id",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "parse_provider_date",
    "format_timestamp",
    "days_since",
]
