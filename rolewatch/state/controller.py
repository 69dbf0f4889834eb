"""The watch controller: single owner of the state and its persistence.

The presentation layer (CLI, scheduler) talks only to this class. Actions are
delegated to the pure functions in ``actions`` and each persists exactly the
collections it changed.
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Union

from rolewatch.config.models import AdvancedConfig, LimitsConfig, ProfileSeed
from rolewatch.domain.models import CompanyCacheEntry, TrackedCompany, TrackedJob, UserProfile
from rolewatch.logging import get_logger
from rolewatch.matching.models import RelevantMatch
from rolewatch.matching.selector import get_relevant_matches
from rolewatch.persistence.store import COMPANY_CACHE_KEY, PROFILE_KEY, STATE_KEYS, StateStore
from rolewatch.pipeline.models import RefreshRunResult
from rolewatch.pipeline.runner import RefreshPipeline
from rolewatch.summary.aggregator import (
    MatchSummary,
    NotificationCount,
    compute_match_summary,
    compute_notification_count,
)
from rolewatch.utils.timestamps import ensure_utc, utc_now

from . import actions
from .exceptions import ActionRejectedError
from .models import ActionResult, WatchState

logger = get_logger(__name__, component="state")


class WatchController:
    """Owns the watch state, the store and the refresh pipeline."""

    def __init__(
        self,
        store: StateStore,
        limits: Optional[LimitsConfig] = None,
        advanced_config: Optional[AdvancedConfig] = None,
        pipeline: Optional[RefreshPipeline] = None,
        seed: Optional[ProfileSeed] = None,
    ):
        self.store = store
        self.limits = limits or LimitsConfig()
        self.pipeline = pipeline or RefreshPipeline(advanced_config)
        self.seed = seed
        self._state = WatchState()

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def profile(self) -> Optional[UserProfile]:
        return self._state.profile

    @property
    def role_queries(self) -> List[str]:
        return self._state.role_queries

    @property
    def companies(self) -> List[TrackedCompany]:
        return self._state.companies

    @property
    def tracked_jobs(self) -> List[TrackedJob]:
        return list(self._state.tracked_jobs)

    @property
    def company_cache(self) -> Dict[str, CompanyCacheEntry]:
        return dict(self._state.company_cache)

    def load(self) -> WatchState:
        """Load state from the store.

        Legacy profiles are migrated and written back. With no stored profile
        the configured seed (if any) becomes the profile.
        """
        documents = self.store.load(STATE_KEYS)
        state = WatchState.from_documents(documents)
        raw_profile = documents.get(PROFILE_KEY)

        if state.profile is None and self.seed is not None:
            profile = UserProfile(role_queries=self.seed.role_queries, companies=self.seed.companies)
            state = state.model_copy(update={"profile": profile})
            self.store.save({PROFILE_KEY: profile})
            logger.info(
                "Seeded profile from configuration",
                extra={"event": "state.profile.seeded", "company_count": len(profile.companies)},
            )
        elif state.profile is not None and "roles" in (raw_profile or {}):
            self.store.save({PROFILE_KEY: state.profile})

        self._state = state
        logger.info(
            "State loaded",
            extra={
                "event": "state.loaded",
                "has_profile": state.profile is not None,
                "company_count": len(state.companies),
                "tracked_count": len(state.tracked_jobs),
            },
        )
        return state

    def relevant_matches(self, company_id: str) -> List[RelevantMatch]:
        """Relevant matches for one company, newest posting first."""
        entry = self._state.company_cache.get(company_id)
        if entry is None:
            return []
        return get_relevant_matches(entry.jobs, self.role_queries, self.limits.match_threshold)

    def notification_count(self, now: Optional[datetime] = None) -> NotificationCount:
        return compute_notification_count(
            self._state.company_cache,
            self.role_queries,
            threshold=self.limits.match_threshold,
            fresh_days=self.limits.fresh_days,
            cap=self.limits.badge_cap,
            now=now,
        )

    def match_summary(self) -> MatchSummary:
        return compute_match_summary(
            self._state.company_cache, self.role_queries, self.limits.match_threshold
        )

    def set_role_queries(self, queries: Sequence[str]) -> ActionResult:
        return self._apply("set_role_queries", actions.set_role_queries, self._state, queries, self.limits)

    def add_tracked_company(self, value: Union[str, TrackedCompany], verify: bool = False) -> ActionResult:
        """Track a company from a directory name, board slug or board URL.

        With ``verify`` the company's board is fetched first; a failing fetch
        rejects the action, and a successful one seeds its cache entry.
        """
        if not verify:
            return self._apply("add_tracked_company", actions.add_tracked_company, self._state, value, self.limits)

        result = self._apply_pure("add_tracked_company", actions.add_tracked_company, self._state, value, self.limits)
        company = result.state.companies[-1]
        if not company.is_fetchable:
            return self._commit("add_tracked_company", result)

        refresh = self.pipeline.refresh_company(company, None, list(result.state.tracked_jobs), utc_now())
        if refresh.entry.error:
            self._rejected(
                "add_tracked_company",
                ActionRejectedError(refresh.entry.error, action="add_tracked_company", reason="fetch_failed"),
            )

        profile = result.state.profile
        if refresh.entry.company_name and refresh.entry.company_name != company.name:
            company = company.model_copy(update={"name": refresh.entry.company_name})
            profile = profile.model_copy(update={"companies": [*profile.companies[:-1], company]})

        cache = {**result.state.company_cache, company.id: refresh.entry}
        verified = ActionResult(
            state=result.state.model_copy(update={"profile": profile, "company_cache": cache}),
            delta={PROFILE_KEY: profile, COMPANY_CACHE_KEY: cache},
        )
        return self._commit("add_tracked_company", verified)

    def remove_tracked_company(self, company_id: str) -> ActionResult:
        return self._apply("remove_tracked_company", actions.remove_tracked_company, self._state, company_id)

    def add_tracked_job(self, company_id: str, job_id: str, now: Optional[datetime] = None) -> ActionResult:
        return self._apply(
            "add_tracked_job", actions.add_tracked_job, self._state, company_id, job_id, self.limits, now
        )

    def remove_tracked_job(self, job_id: str) -> ActionResult:
        return self._apply("remove_tracked_job", actions.remove_tracked_job, self._state, job_id)

    def refresh(self, now: Optional[datetime] = None) -> RefreshRunResult:
        """Refresh all companies and save cache and tracked jobs once at the end."""
        result = self.pipeline.run_once(self._state, ensure_utc(now) if now else None)
        if result.skipped:
            return result

        self._state = self._merge_refreshed(result.state)
        documents = self._state.documents()
        self.store.save({key: documents[key] for key in result.delta()})
        return result

    def _merge_refreshed(self, refreshed: WatchState) -> WatchState:
        """Fold a finished run into the current state.

        Actions may have been applied while the run was fetching, so the
        current profile wins. Cache entries are kept only for companies still
        tracked, and tracked jobs removed during the run stay removed.
        """
        current = self._state
        tracked_ids = {company.id for company in current.companies}
        cache = dict(current.company_cache)
        cache.update(
            (company_id, entry)
            for company_id, entry in refreshed.company_cache.items()
            if company_id in tracked_ids
        )
        reconciled = {tracked.job_id: tracked for tracked in refreshed.tracked_jobs}
        tracked_jobs = [reconciled.get(tracked.job_id, tracked) for tracked in current.tracked_jobs]
        return current.model_copy(update={"company_cache": cache, "tracked_jobs": tracked_jobs})

    def _apply(self, name: str, action, *args) -> ActionResult:
        return self._commit(name, self._apply_pure(name, action, *args))

    def _apply_pure(self, name: str, action, *args) -> ActionResult:
        try:
            return action(*args)
        except ActionRejectedError as e:
            self._rejected(name, e)

    def _rejected(self, name: str, error: ActionRejectedError) -> None:
        logger.warning(
            f"Action rejected: {error.message}",
            extra={"event": "state.action.rejected", "action": name, "reason": error.reason},
        )
        raise error

    def _commit(self, name: str, result: ActionResult) -> ActionResult:
        self._state = result.state
        if result.delta:
            self.store.save(result.delta)
        logger.info(
            f"Action applied: {name}",
            extra={"event": "state.action.applied", "action": name, "saved_keys": sorted(result.delta)},
        )
        return result
