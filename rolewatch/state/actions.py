"""Pure user actions on the watch state.

Each action takes the current state and returns an ActionResult holding the
new state and the changed collections (the persistence delta). Validation
failures raise ActionRejectedError and leave the input state untouched.
"""

from datetime import datetime
from typing import Iterable, Optional, Union

from rolewatch.adapters.boards import slug_from_board_input, titleize_slug
from rolewatch.adapters.directory import find_directory_company
from rolewatch.config.models import LimitsConfig
from rolewatch.domain.models import Provider, TrackedCompany, TrackedJob, TrackedJobStatus, UserProfile
from rolewatch.matching.text import normalize
from rolewatch.persistence.store import COMPANY_CACHE_KEY, PROFILE_KEY, TRACKED_JOBS_KEY
from rolewatch.utils.timestamps import ensure_utc, utc_now

from .exceptions import ActionRejectedError
from .models import ActionResult, WatchState


def _profile(state: WatchState) -> UserProfile:
    return state.profile or UserProfile()


def set_role_queries(
    state: WatchState, queries: Iterable[str], limits: Optional[LimitsConfig] = None
) -> ActionResult:
    """Replace the role queries.

    Blank queries and duplicates (by normalized form) are dropped before the
    limits are checked.

    Raises:
        ActionRejectedError: If no query remains or there are more than max_queries
    """
    limits = limits or LimitsConfig()

    cleaned = []
    seen = set()
    for query in queries:
        key = normalize(query)
        if not key or key in seen:
            continue
        seen.add(key)
        cleaned.append(query.strip())

    if not cleaned:
        raise ActionRejectedError(
            "At least one role query is required", action="set_role_queries", reason="empty"
        )
    if len(cleaned) > limits.max_queries:
        raise ActionRejectedError(
            f"Max {limits.max_queries} role queries", action="set_role_queries", reason="limit_reached"
        )

    profile = _profile(state).model_copy(update={"role_queries": cleaned})
    return ActionResult(
        state=state.model_copy(update={"profile": profile}),
        delta={PROFILE_KEY: profile},
    )


def resolve_company(value: Union[str, TrackedCompany]) -> TrackedCompany:
    """Resolve user input into a company to track.

    Directory entries win (by name or slug); otherwise the input must be a
    Greenhouse board slug or URL.

    Raises:
        ActionRejectedError: If the input is not a recognizable board
    """
    if isinstance(value, TrackedCompany):
        return value

    company = find_directory_company(value)
    if company is not None:
        return company

    slug = slug_from_board_input(value)
    if not slug:
        raise ActionRejectedError(
            "Enter a valid Greenhouse board slug or URL",
            action="add_tracked_company",
            reason="invalid_board",
        )

    return TrackedCompany(
        id=slug,
        name=titleize_slug(slug),
        provider=Provider.GREENHOUSE,
        board_slug=slug,
        careers_url=f"https://boards.greenhouse.io/{slug}",
    )


def add_tracked_company(
    state: WatchState, value: Union[str, TrackedCompany], limits: Optional[LimitsConfig] = None
) -> ActionResult:
    """Start tracking a company.

    Raises:
        ActionRejectedError: If the input is unparseable, the company is
            already tracked, or max_companies is reached
    """
    limits = limits or LimitsConfig()
    company = resolve_company(value)
    profile = _profile(state)

    if profile.find_company(company.id) is not None:
        raise ActionRejectedError("Already added", action="add_tracked_company", reason="duplicate")
    if len(profile.companies) >= limits.max_companies:
        raise ActionRejectedError(
            f"Max {limits.max_companies} companies", action="add_tracked_company", reason="limit_reached"
        )

    profile = profile.model_copy(update={"companies": [*profile.companies, company]})
    return ActionResult(
        state=state.model_copy(update={"profile": profile}),
        delta={PROFILE_KEY: profile},
    )


def remove_tracked_company(state: WatchState, company_id: str) -> ActionResult:
    """Stop tracking a company, dropping its cache entry and tracked jobs.

    Raises:
        ActionRejectedError: If the company is not tracked
    """
    profile = _profile(state)
    if profile.find_company(company_id) is None:
        raise ActionRejectedError(
            f"Unknown company '{company_id}'", action="remove_tracked_company", reason="unknown_company"
        )

    profile = profile.model_copy(
        update={"companies": [c for c in profile.companies if c.id != company_id]}
    )
    delta = {PROFILE_KEY: profile}
    update = {"profile": profile}

    if company_id in state.company_cache:
        cache = {k: v for k, v in state.company_cache.items() if k != company_id}
        delta[COMPANY_CACHE_KEY] = update["company_cache"] = cache

    tracked = [t for t in state.tracked_jobs if t.company_id != company_id]
    if len(tracked) != len(state.tracked_jobs):
        delta[TRACKED_JOBS_KEY] = update["tracked_jobs"] = tracked

    return ActionResult(state=state.model_copy(update=update), delta=delta)


def add_tracked_job(
    state: WatchState,
    company_id: str,
    job_id: str,
    limits: Optional[LimitsConfig] = None,
    now: Optional[datetime] = None,
) -> ActionResult:
    """Pin a job from a company's current ingested jobs.

    Pinning an already tracked job is a no-op with an empty delta.

    Raises:
        ActionRejectedError: If the job is not in the company's cache or
            max_tracked is reached
    """
    limits = limits or LimitsConfig()

    if state.find_tracked_job(job_id) is not None:
        return ActionResult(state=state)

    entry = state.company_cache.get(company_id)
    job = entry.find_job(job_id) if entry else None
    if job is None:
        raise ActionRejectedError(
            f"Unknown job '{job_id}' for company '{company_id}'", action="add_tracked_job", reason="unknown_job"
        )
    if len(state.tracked_jobs) >= limits.max_tracked:
        raise ActionRejectedError(
            f"Max {limits.max_tracked} tracked jobs", action="add_tracked_job", reason="limit_reached"
        )

    now = ensure_utc(now or utc_now())
    tracked = TrackedJob(
        job_id=job.id,
        company_id=company_id,
        company_name=entry.company_name,
        title=job.title,
        url=job.url,
        location=job.location,
        status=TrackedJobStatus.OPEN,
        last_checked_at=now,
        last_seen_at=now,
    )
    tracked_jobs = [*state.tracked_jobs, tracked]
    return ActionResult(
        state=state.model_copy(update={"tracked_jobs": tracked_jobs}),
        delta={TRACKED_JOBS_KEY: tracked_jobs},
    )


def remove_tracked_job(state: WatchState, job_id: str) -> ActionResult:
    """Unpin a job, whatever its status.

    Raises:
        ActionRejectedError: If the job is not tracked
    """
    if state.find_tracked_job(job_id) is None:
        raise ActionRejectedError(
            f"Job '{job_id}' is not tracked", action="remove_tracked_job", reason="unknown_job"
        )

    tracked_jobs = [t for t in state.tracked_jobs if t.job_id != job_id]
    return ActionResult(
        state=state.model_copy(update={"tracked_jobs": tracked_jobs}),
        delta={TRACKED_JOBS_KEY: tracked_jobs},
    )
