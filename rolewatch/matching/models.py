"""Data models for match outcomes.

Neither model is persisted; both are recomputed from the current ingested
jobs and role queries whenever they are needed.
"""

from dataclasses import dataclass
from typing import Optional

from rolewatch.domain.models import IngestedJob


@dataclass(frozen=True)
class MatchResult:
    """Best score of a title across the query set, and which query produced it.

    Attributes:
        score: Token coverage in [0, 1]
        query: The winning query as the user typed it, or None when nothing scored
    """

    score: float = 0.0
    query: Optional[str] = None

    def meets(self, threshold: float) -> bool:
        """Whether this result counts as a relevant match at the given threshold."""
        return self.score >= threshold


@dataclass(frozen=True)
class RelevantMatch:
    """An ingested job paired with its best match."""

    job: IngestedJob
    match: MatchResult

    @property
    def job_id(self) -> str:
        return self.job.id
