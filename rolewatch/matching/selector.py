"""Selecting the relevant matches out of a company's ingested jobs."""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from rolewatch.domain.models import IngestedJob

from .engine import TitleMatcher
from .models import RelevantMatch

MATCH_THRESHOLD = 0.75

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def get_relevant_matches(
    jobs: Iterable[IngestedJob],
    queries: Optional[Sequence[str]],
    threshold: float = MATCH_THRESHOLD,
) -> List[RelevantMatch]:
    """Pair each job with its best match and keep the relevant ones.

    The result is freshly computed on every call, sorted newest posting first;
    jobs without a posting date sort after all dated ones, keeping their
    input order.

    Args:
        jobs: Current ingested jobs
        queries: Current role queries
        threshold: Minimum score to count as relevant

    Returns:
        List of RelevantMatch, all with score >= threshold
    """
    matcher = TitleMatcher(queries or ())

    matches = []
    for job in jobs:
        match = matcher.match(job.title)
        if match.meets(threshold):
            matches.append(RelevantMatch(job=job, match=match))

    matches.sort(key=lambda m: (m.job.posted_at is not None, m.job.posted_at or _OLDEST), reverse=True)
    return matches
