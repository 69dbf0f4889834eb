"""Refresh orchestration: fetch, ingest and reconcile every tracked company."""

import threading
import time
from datetime import datetime
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from rolewatch.adapters.base import BaseAdapter
from rolewatch.adapters.exceptions import AdapterError
from rolewatch.adapters.factory import get_adapter
from rolewatch.config.models import AdvancedConfig
from rolewatch.domain.models import CompanyCacheEntry, TrackedCompany, TrackedJob
from rolewatch.ingestion.service import JobIngestor
from rolewatch.logging import get_logger
from rolewatch.logging.context import log_context
from rolewatch.state.models import WatchState
from rolewatch.tracking.reconciler import reconcile_tracked_jobs
from rolewatch.utils.timestamps import ensure_utc, utc_now

from .models import CompanyRefresh, CompanyRunStats, RefreshRunResult

logger = get_logger(__name__, component="pipeline")

AdapterFactory = Callable[[TrackedCompany, AdvancedConfig], BaseAdapter]


class RefreshPipeline:
    """
    Orchestrates a single refresh across all tracked companies.

    Companies are processed one at a time. A failing fetch is recorded on
    that company's cache entry and never stops the run. Only one run executes
    at a time; an overlapping call returns a skipped result.
    """

    def __init__(
        self,
        advanced_config: Optional[AdvancedConfig] = None,
        adapter_factory: AdapterFactory = get_adapter,
    ):
        """
        Initialize the refresh pipeline.

        Args:
            advanced_config: HTTP settings handed to adapters
            adapter_factory: Builds the adapter for a company (replaceable in tests)
        """
        self.advanced_config = advanced_config or AdvancedConfig()
        self.adapter_factory = adapter_factory
        self._lock = threading.Lock()

    def run_once(self, state: WatchState, now: Optional[datetime] = None) -> RefreshRunResult:
        """
        Refresh every fetchable company of the profile.

        Every company in one run is stamped with the same ``now``. The input
        state is not modified; the result carries the new state.

        Args:
            state: Current watch state
            now: Timestamp for this refresh (defaults to current UTC)

        Returns:
            RefreshRunResult with the new state and per-company stats
        """
        run_started_at = utc_now()
        run_id = uuid4().hex

        if not self._lock.acquire(blocking=False):
            with log_context(run_id=run_id):
                logger.warning(
                    "Refresh skipped: previous run still in progress",
                    extra={"event": "refresh.run.skipped", "reason": "lock_held"},
                )
            return RefreshRunResult(
                run_id=run_id,
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                skipped=True,
            )

        try:
            with log_context(run_id=run_id):
                now = ensure_utc(now or run_started_at)
                companies = state.companies
                fetchable = [c for c in companies if c.is_fetchable]
                link_only = [c.id for c in companies if not c.is_fetchable]

                logger.info(
                    "Refresh run started",
                    extra={
                        "event": "refresh.run.started",
                        "company_count": len(fetchable),
                        "link_only_count": len(link_only),
                    },
                )

                cache: Dict[str, CompanyCacheEntry] = dict(state.company_cache)
                tracked_jobs: List[TrackedJob] = list(state.tracked_jobs)
                company_stats: List[CompanyRunStats] = []

                for company in fetchable:
                    refresh = self.refresh_company(company, cache.get(company.id), tracked_jobs, now)
                    cache[company.id] = refresh.entry
                    tracked_jobs = refresh.tracked_jobs
                    company_stats.append(refresh.stats)

                result = RefreshRunResult(
                    run_id=run_id,
                    run_started_at=run_started_at,
                    run_finished_at=utc_now(),
                    state=state.model_copy(update={"company_cache": cache, "tracked_jobs": tracked_jobs}),
                    company_stats=company_stats,
                    skipped_companies=link_only,
                )

                logger.info(
                    "Refresh run completed",
                    extra={
                        "event": "refresh.run.completed",
                        "duration_ms": int(result.total_duration_seconds * 1000),
                        "total_fetched": result.total_fetched,
                        "total_errors": result.total_errors,
                        "had_errors": result.had_errors,
                    },
                )
                return result
        finally:
            self._lock.release()

    def refresh_company(
        self,
        company: TrackedCompany,
        previous_entry: Optional[CompanyCacheEntry],
        tracked_jobs: List[TrackedJob],
        now: datetime,
    ) -> CompanyRefresh:
        """
        Fetch, ingest and reconcile one company.

        On fetch failure the company gets an entry with no jobs and the error
        message, and its tracked jobs are left as they were.

        Args:
            company: Company to refresh
            previous_entry: Its cache entry from the last refresh, if any
            tracked_jobs: All tracked jobs
            now: Timestamp for this refresh

        Returns:
            CompanyRefresh with the new entry, updated tracked jobs and stats
        """
        company_start = time.time()
        stats = CompanyRunStats(company_id=company.id)

        with log_context(company_id=company.id, provider=company.provider):
            logger.info(f"Refreshing company: {company.name}", extra={"event": "company.run.started"})

            try:
                adapter = self.adapter_factory(company, self.advanced_config)
                fetched = adapter.fetch_postings(company)
            except AdapterError as e:
                return self._failed(company, tracked_jobs, now, stats, e, company_start)
            except Exception as e:
                logger.error(
                    f"Unexpected error fetching {company.name}: {e}",
                    extra={"event": "company.fetch.failed", "error_type": type(e).__name__},
                    exc_info=True,
                )
                return self._failed(company, tracked_jobs, now, stats, e, company_start)

            stats.fetched_count = len(fetched.postings)

            ingestion = JobIngestor(company.id, company.provider, now=now).ingest(
                fetched.postings, previous_entry.jobs if previous_entry else []
            )
            stats.new_count = ingestion.new_count
            stats.changed_count = ingestion.changed_count

            reconciled = reconcile_tracked_jobs(tracked_jobs, company.id, ingestion.jobs, now)
            stats.tracked_closed = reconciled.closed_count
            stats.tracked_changed = reconciled.changed_count

            entry = CompanyCacheEntry(
                company_id=company.id,
                company_name=fetched.company_name or company.name,
                jobs=ingestion.jobs,
                fetched_at=now,
                error=None,
            )
            stats.duration_seconds = time.time() - company_start

            logger.info(
                f"Company refreshed: {company.name}",
                extra={
                    "event": "company.run.completed",
                    "fetched": stats.fetched_count,
                    "new": stats.new_count,
                    "changed": stats.changed_count,
                    "tracked_closed": stats.tracked_closed,
                    "tracked_changed": stats.tracked_changed,
                    "duration_seconds": stats.duration_seconds,
                },
            )
            return CompanyRefresh(entry=entry, tracked_jobs=reconciled.tracked_jobs, stats=stats)

    def _failed(
        self,
        company: TrackedCompany,
        tracked_jobs: List[TrackedJob],
        now: datetime,
        stats: CompanyRunStats,
        error: Exception,
        company_start: float,
    ) -> CompanyRefresh:
        stats.had_errors = True
        stats.error_message = str(error)
        stats.duration_seconds = time.time() - company_start

        logger.warning(
            f"Fetch failed for {company.name}: {error}",
            extra={"event": "company.fetch.failed", "error_type": type(error).__name__, "error": str(error)},
        )

        entry = CompanyCacheEntry(
            company_id=company.id,
            company_name=company.name,
            jobs=[],
            fetched_at=now,
            error=str(error),
        )
        return CompanyRefresh(entry=entry, tracked_jobs=list(tracked_jobs), stats=stats)
