"""Cross-company rollups of relevant matches."""

from .aggregator import (
    BADGE_CAP,
    FRESH_DAYS,
    MatchSummary,
    NotificationCount,
    compute_match_summary,
    compute_notification_count,
    is_fresh,
    resolve_job_dates,
)

__all__ = [
    "BADGE_CAP",
    "FRESH_DAYS",
    "MatchSummary",
    "NotificationCount",
    "compute_match_summary",
    "compute_notification_count",
    "is_fresh",
    "resolve_job_dates",
]
