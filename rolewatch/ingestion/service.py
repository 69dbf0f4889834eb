"""Job ingestion service.

Turns one company's freshly fetched RawPostings into IngestedJobs, using the
company's previously stored jobs as history:
1. Derive the stable id (provider id, or a synthesized fallback)
2. Look up the previous record for that id
3. Hash the displayed content (title, location, url)
4. Carry first_seen_at forward; stamp last_changed_at only when the hash moved

Repeated ids within one fetch keep the first posting only. Postings missing
from the fetch are not carried over. Closure is only tracked for pinned jobs,
by the reconciler.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from rolewatch.domain.models import IngestedJob, RawPosting
from rolewatch.logging import get_logger
from rolewatch.utils.hashing import compute_content_hash, compute_stable_id
from rolewatch.utils.timestamps import ensure_utc, utc_now

logger = get_logger(__name__, component="ingestion")


@dataclass
class IngestionResult:
    """Ingested jobs for one company plus counts for reporting.

    Attributes:
        jobs: Ingested jobs in fetch order
        new_count: Ids not present in the previous jobs
        changed_count: Ids whose content hash differs from the previous one
        unchanged_count: Ids with an identical content hash
        dropped_count: Previous ids absent from this fetch
        duplicate_count: Postings skipped because their id was already ingested
    """

    jobs: List[IngestedJob] = field(default_factory=list)
    new_count: int = 0
    changed_count: int = 0
    unchanged_count: int = 0
    dropped_count: int = 0
    duplicate_count: int = 0


class JobIngestor:
    """Ingests postings for one company against its previous jobs.

    All jobs ingested by one instance share the same ``now`` timestamp, so a
    refresh stamps a single consistent instant.
    """

    def __init__(
        self,
        company_id: str,
        provider: str,
        now: Optional[datetime] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.company_id = company_id
        self.provider = provider
        self.now = ensure_utc(now or utc_now())
        self.logger = logger_instance or logger

    def ingest(
        self,
        fetched_postings: Iterable[RawPosting],
        previous_jobs: Optional[Iterable[IngestedJob]] = None,
    ) -> IngestionResult:
        """Build the new job list from fetched postings and previous history.

        Args:
            fetched_postings: Postings returned by the latest fetch
            previous_jobs: Jobs stored for this company by the last refresh

        Returns:
            IngestionResult with the rebuilt job list
        """
        previous_by_id: Dict[str, IngestedJob] = {job.id: job for job in previous_jobs or ()}
        result = IngestionResult()
        seen_ids = set()

        for posting in fetched_postings:
            stable_id = compute_stable_id(
                self.provider, self.company_id, posting.id, posting.local_id or posting.url
            )
            if stable_id in seen_ids:
                result.duplicate_count += 1
                self.logger.warning(
                    "Skipping duplicate posting",
                    extra={
                        "event": "ingestion.posting.duplicate",
                        "company_id": self.company_id,
                        "job_id": stable_id,
                    },
                )
                continue

            previous = previous_by_id.get(stable_id)
            content_hash = compute_content_hash(posting.title, posting.location, posting.url)

            if previous is None:
                result.new_count += 1
                last_changed_at = None
            elif previous.content_hash != content_hash:
                result.changed_count += 1
                last_changed_at = self.now
            else:
                result.unchanged_count += 1
                last_changed_at = previous.last_changed_at

            result.jobs.append(
                IngestedJob(
                    id=stable_id,
                    title=posting.title,
                    url=posting.url,
                    location=posting.location,
                    posted_at=posting.posted_at,
                    provider_updated_at=posting.provider_updated_at,
                    first_seen_at=previous.first_seen_at if previous else self.now,
                    last_fetched_at=self.now,
                    content_hash=content_hash,
                    last_changed_at=last_changed_at,
                )
            )
            seen_ids.add(stable_id)

        result.dropped_count = len(set(previous_by_id) - seen_ids)

        self.logger.info(
            "Ingested company postings",
            extra={
                "event": "ingestion.company.completed",
                "company_id": self.company_id,
                "provider": self.provider,
                "total": len(result.jobs),
                "new": result.new_count,
                "changed": result.changed_count,
                "unchanged": result.unchanged_count,
                "dropped": result.dropped_count,
                "duplicates": result.duplicate_count,
            },
        )
        return result


def ingest_jobs(
    company_id: str,
    provider: str,
    fetched_postings: Iterable[RawPosting],
    previous_jobs: Optional[Iterable[IngestedJob]] = None,
    now: Optional[datetime] = None,
) -> List[IngestedJob]:
    """Functional form of ``JobIngestor.ingest`` returning only the jobs."""
    return JobIngestor(company_id, provider, now=now).ingest(fetched_postings, previous_jobs).jobs
