"""Badge and summary aggregation over every company's ingested jobs.

The notification count is the number of distinct fresh relevant matches
across all tracked companies, displayed with a cap ("99+").
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union

from rolewatch.domain.models import CompanyCacheEntry, IngestedJob
from rolewatch.matching.selector import MATCH_THRESHOLD, get_relevant_matches
from rolewatch.utils.timestamps import days_since, ensure_utc, utc_now

FRESH_DAYS = 7
BADGE_CAP = 99

CompanyCaches = Union[Mapping[str, CompanyCacheEntry], Iterable[CompanyCacheEntry]]


@dataclass(frozen=True)
class NotificationCount:
    """Distinct fresh relevant matches, with the cap applied for display.

    Attributes:
        total: Uncapped number of distinct fresh matches
        cap: Largest count shown as a number
    """

    total: int
    cap: int = BADGE_CAP

    @property
    def displayed(self) -> int:
        return min(self.total, self.cap)

    @property
    def label(self) -> str:
        """Badge text: empty for zero, ``"<cap>+"`` beyond the cap."""
        if self.total <= 0:
            return ""
        if self.total > self.cap:
            return f"{self.cap}+"
        return str(self.total)


@dataclass(frozen=True)
class MatchSummary:
    """Relevant matches across companies after a refresh."""

    total: int
    newest_posted_at: Optional[datetime] = None


def _entries(company_caches: CompanyCaches) -> Iterable[CompanyCacheEntry]:
    if isinstance(company_caches, Mapping):
        return company_caches.values()
    return company_caches


def resolve_job_dates(job: IngestedJob) -> Tuple[datetime, datetime]:
    """Dates shown beside a job: when it was first seen and how fresh it is.

    Freshness prefers the provider's own update time, then the last local
    content change, then the last fetch.

    Returns:
        Tuple of (seen_at, freshness_at)
    """
    freshness_at = job.provider_updated_at or job.last_changed_at or job.last_fetched_at
    return job.first_seen_at, freshness_at


def is_fresh(job: IngestedJob, fresh_days: int = FRESH_DAYS, now: Optional[datetime] = None) -> bool:
    """Whether the job was posted within the freshness window.

    Jobs without a posting date are never fresh.
    """
    age = days_since(job.posted_at, now)
    return age is not None and age <= fresh_days


def compute_notification_count(
    company_caches: CompanyCaches,
    queries: Optional[Sequence[str]],
    threshold: float = MATCH_THRESHOLD,
    fresh_days: int = FRESH_DAYS,
    cap: int = BADGE_CAP,
    now: Optional[datetime] = None,
) -> NotificationCount:
    """Count distinct fresh relevant matches across all companies.

    Args:
        company_caches: Cache entries keyed by company id, or an iterable of them
        queries: Current role queries
        threshold: Minimum match score
        fresh_days: Freshness window in days
        cap: Display cap for the badge
        now: Reference time for freshness (defaults to current UTC)

    Returns:
        NotificationCount with the uncapped total and the cap
    """
    now = ensure_utc(now or utc_now())
    seen_ids = set()

    for entry in _entries(company_caches):
        for relevant in get_relevant_matches(entry.jobs, queries, threshold):
            if is_fresh(relevant.job, fresh_days, now):
                seen_ids.add(relevant.job_id)

    return NotificationCount(total=len(seen_ids), cap=cap)


def compute_match_summary(
    company_caches: CompanyCaches,
    queries: Optional[Sequence[str]],
    threshold: float = MATCH_THRESHOLD,
) -> MatchSummary:
    """Total relevant matches across companies and the newest posting date."""
    total = 0
    newest = None

    for entry in _entries(company_caches):
        matches = get_relevant_matches(entry.jobs, queries, threshold)
        total += len(matches)
        for relevant in matches:
            posted_at = relevant.job.posted_at
            if posted_at is not None and (newest is None or posted_at > newest):
                newest = posted_at

    return MatchSummary(total=total, newest_posted_at=newest)
