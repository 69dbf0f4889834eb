"""Data models for refresh run tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from rolewatch.domain.models import CompanyCacheEntry, TrackedJob
from rolewatch.persistence.store import COMPANY_CACHE_KEY, TRACKED_JOBS_KEY
from rolewatch.state.models import WatchState


@dataclass
class CompanyRunStats:
    """
    Statistics for a single company within a refresh run.

    Attributes:
        company_id: Tracked company id
        fetched_count: Postings returned by the adapter
        new_count: Jobs seen for the first time
        changed_count: Jobs whose displayed content changed
        tracked_closed: Tracked jobs of this company now closed
        tracked_changed: Tracked jobs of this company now changed
        duration_seconds: Time spent on this company
        had_errors: Whether the fetch failed
        error_message: Failure recorded on the cache entry
    """

    company_id: str
    fetched_count: int = 0
    new_count: int = 0
    changed_count: int = 0
    tracked_closed: int = 0
    tracked_changed: int = 0
    duration_seconds: float = 0.0
    had_errors: bool = False
    error_message: Optional[str] = None


@dataclass
class CompanyRefresh:
    """Outcome of refreshing one company: its new cache entry, tracked jobs and stats."""

    entry: CompanyCacheEntry
    tracked_jobs: List[TrackedJob]
    stats: CompanyRunStats


@dataclass
class RefreshRunResult:
    """
    Aggregate results from a complete refresh.

    Attributes:
        run_id: Identifier stamped on every log line of the run
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        state: State after the run (None when skipped)
        company_stats: Per-company statistics
        skipped_companies: Link-only companies that were not fetched
        skipped: Whether the run was skipped because another one was in progress
    """

    run_id: str
    run_started_at: datetime
    run_finished_at: datetime
    state: Optional[WatchState] = None
    company_stats: List[CompanyRunStats] = field(default_factory=list)
    skipped_companies: List[str] = field(default_factory=list)
    skipped: bool = False
    total_duration_seconds: float = 0.0

    def __post_init__(self):
        if self.total_duration_seconds == 0.0:
            self.total_duration_seconds = (self.run_finished_at - self.run_started_at).total_seconds()

    @property
    def total_fetched(self) -> int:
        return sum(s.fetched_count for s in self.company_stats)

    @property
    def total_errors(self) -> int:
        return sum(1 for s in self.company_stats if s.had_errors)

    @property
    def had_errors(self) -> bool:
        return any(s.had_errors for s in self.company_stats)

    def delta(self) -> Dict[str, Any]:
        """Collections to persist after the run (empty when skipped)."""
        if self.skipped or self.state is None:
            return {}
        return {
            COMPANY_CACHE_KEY: self.state.company_cache,
            TRACKED_JOBS_KEY: self.state.tracked_jobs,
        }
