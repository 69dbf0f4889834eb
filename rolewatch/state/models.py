"""Explicit watch state and the result of applying an action to it."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from rolewatch.domain.models import CompanyCacheEntry, TrackedCompany, TrackedJob, UserProfile
from rolewatch.persistence.store import COMPANY_CACHE_KEY, PROFILE_KEY, TRACKED_JOBS_KEY

from .profile import migrate_profile


class WatchState(BaseModel):
    """Everything the watcher knows: profile, per-company cache, tracked jobs.

    Instances are treated as immutable; actions and refreshes return new
    states built with ``model_copy(update=...)``.
    """

    profile: Optional[UserProfile] = None
    company_cache: Dict[str, CompanyCacheEntry] = Field(default_factory=dict)
    tracked_jobs: List[TrackedJob] = Field(default_factory=list)

    @property
    def role_queries(self) -> List[str]:
        return list(self.profile.role_queries) if self.profile else []

    @property
    def companies(self) -> List[TrackedCompany]:
        return list(self.profile.companies) if self.profile else []

    def find_tracked_job(self, job_id: str) -> Optional[TrackedJob]:
        for tracked in self.tracked_jobs:
            if tracked.job_id == job_id:
                return tracked
        return None

    @classmethod
    def from_documents(cls, documents: Mapping[str, Any]) -> "WatchState":
        """Build state from stored JSON documents, migrating legacy profiles."""
        cache_doc = documents.get(COMPANY_CACHE_KEY) or {}
        return cls(
            profile=migrate_profile(documents.get(PROFILE_KEY)),
            company_cache={
                company_id: CompanyCacheEntry.model_validate(entry)
                for company_id, entry in cache_doc.items()
            },
            tracked_jobs=[TrackedJob.model_validate(doc) for doc in documents.get(TRACKED_JOBS_KEY) or []],
        )

    def documents(self) -> Dict[str, Any]:
        """All collections keyed by their store key."""
        return {
            PROFILE_KEY: self.profile,
            COMPANY_CACHE_KEY: self.company_cache,
            TRACKED_JOBS_KEY: self.tracked_jobs,
        }


@dataclass
class ActionResult:
    """New state plus the collections that changed, keyed by store key.

    An empty delta means the action was a no-op and nothing needs saving.
    """

    state: WatchState
    delta: Dict[str, Any] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.delta)
