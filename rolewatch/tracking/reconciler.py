"""Tracked-job reconciliation.

For each tracked job belonging to the refreshed company:
- id absent from the live jobs -> CLOSED, snapshot left untouched
- id present, title/url/location differ -> CHANGED, snapshot updated
- id present, snapshot identical -> OPEN
A closed job whose id shows up again goes back to OPEN or CHANGED.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from rolewatch.domain.models import IngestedJob, TrackedJob, TrackedJobStatus
from rolewatch.logging import get_logger
from rolewatch.utils.timestamps import ensure_utc, utc_now

logger = get_logger(__name__, component="tracking")

_SNAPSHOT_FIELDS = ("title", "url", "location")


@dataclass
class ReconcileResult:
    """Updated tracked jobs plus status counts for the refreshed company."""

    tracked_jobs: List[TrackedJob] = field(default_factory=list)
    open_count: int = 0
    changed_count: int = 0
    closed_count: int = 0


def _snapshot_differs(tracked: TrackedJob, live: IngestedJob) -> bool:
    return any((getattr(tracked, name) or "") != (getattr(live, name) or "") for name in _SNAPSHOT_FIELDS)


def reconcile_tracked_jobs(
    tracked_jobs: Iterable[TrackedJob],
    company_id: str,
    current_jobs: Iterable[IngestedJob],
    now: Optional[datetime] = None,
) -> ReconcileResult:
    """Advance the status of every tracked job of one company.

    Tracked jobs of other companies are passed through unchanged and in order.
    Inputs are not mutated; updated jobs are new model instances.

    Args:
        tracked_jobs: All tracked jobs
        company_id: Company whose jobs were just refreshed
        current_jobs: That company's freshly ingested jobs
        now: Timestamp of this refresh

    Returns:
        ReconcileResult with the full updated tracked list
    """
    now = ensure_utc(now or utc_now())
    live_by_id = {str(job.id): job for job in current_jobs}
    result = ReconcileResult()

    for tracked in tracked_jobs:
        if tracked.company_id != company_id:
            result.tracked_jobs.append(tracked)
            continue

        live = live_by_id.get(str(tracked.job_id))
        if live is None:
            updated = tracked.model_copy(
                update={"status": TrackedJobStatus.CLOSED.value, "last_checked_at": now}
            )
            result.closed_count += 1
            if tracked.status != TrackedJobStatus.CLOSED:
                logger.info(
                    "Tracked job closed",
                    extra={
                        "event": "tracking.job.closed",
                        "company_id": company_id,
                        "job_id": tracked.job_id,
                    },
                )
        else:
            changed = _snapshot_differs(tracked, live)
            status = (TrackedJobStatus.CHANGED if changed else TrackedJobStatus.OPEN).value
            updated = tracked.model_copy(
                update={
                    "title": live.title,
                    "url": live.url,
                    "location": live.location,
                    "status": status,
                    "last_checked_at": now,
                    "last_seen_at": now,
                }
            )
            if changed:
                result.changed_count += 1
                logger.info(
                    "Tracked job changed",
                    extra={
                        "event": "tracking.job.changed",
                        "company_id": company_id,
                        "job_id": tracked.job_id,
                    },
                )
            else:
                result.open_count += 1

        result.tracked_jobs.append(updated)

    return result
