"""Core domain models for postings, companies, and tracked jobs.

This module defines the data structures shared across the core:
- RawPosting: canonical record handed over by a board adapter
- IngestedJob: posting plus identity, first-seen and change tracking
- CompanyCacheEntry: last refresh outcome for one tracked company
- TrackedCompany / UserProfile: what the user watches
- TrackedJob: a pinned posting with its open/changed/closed status
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from rolewatch.utils.timestamps import ensure_utc, parse_provider_date, utc_now


class Provider(str, Enum):
    """Job board providers a company can be tracked on."""

    GREENHOUSE = "greenhouse"
    LEVER = "lever"
    CUSTOM = "custom"  # link-only careers page, never fetched


PROVIDERS = {p.value for p in Provider}


def _text_or_empty(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip()


def _utc_or_none(v: Any) -> Optional[datetime]:
    return parse_provider_date(v)


class RawPosting(BaseModel):
    """Posting as returned by a board adapter, before ingestion.

    Absent or malformed fields are defaulted here (empty strings, None dates)
    so downstream matching and reconciliation never special-case them. A
    posting without a title is kept with an empty title rather than dropped.
    """

    id: Optional[str] = Field(None, description="Provider-assigned posting id")
    local_id: Optional[str] = Field(
        None, description="Provider-local identifier used when id is absent"
    )
    title: str = Field("", description="Job title")
    url: str = Field("", description="Link to the posting")
    location: str = Field("", description="Job location")
    posted_at: Optional[datetime] = Field(None, description="When the job was posted (UTC)")
    provider_updated_at: Optional[datetime] = Field(
        None, description="Provider's own last-update stamp (UTC)"
    )

    @field_validator("id", "local_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Optional[str]:
        """Provider ids arrive as ints or strings; blank means absent."""
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("title", "url", "location", mode="before")
    @classmethod
    def default_text(cls, v: Any) -> str:
        return _text_or_empty(v)

    @field_validator("posted_at", "provider_updated_at", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> Optional[datetime]:
        return _utc_or_none(v)


class IngestedJob(BaseModel):
    """A posting after ingestion, with stable identity and history.

    ``first_seen_at`` is set on first observation and never changes.
    ``last_changed_at`` stays None until the content hash differs from the
    previously stored one, then records when that happened.
    """

    id: str = Field(..., description="Stable job id (join key across refreshes)")
    title: str = ""
    url: str = ""
    location: str = ""
    posted_at: Optional[datetime] = None
    provider_updated_at: Optional[datetime] = None
    first_seen_at: datetime
    last_fetched_at: datetime
    content_hash: str
    last_changed_at: Optional[datetime] = None

    @field_validator("title", "url", "location", mode="before")
    @classmethod
    def default_text(cls, v: Any) -> str:
        return _text_or_empty(v)

    @field_validator("posted_at", "provider_updated_at", "last_changed_at", mode="before")
    @classmethod
    def parse_optional_dates(cls, v: Any) -> Optional[datetime]:
        return _utc_or_none(v)

    @field_validator("first_seen_at", "last_fetched_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class CompanyCacheEntry(BaseModel):
    """Outcome of the latest refresh for one company.

    Replaced wholesale on every refresh. On fetch failure ``jobs`` is empty and
    ``error`` holds the failure message.
    """

    company_id: str
    company_name: str
    jobs: List[IngestedJob] = Field(default_factory=list)
    fetched_at: datetime
    error: Optional[str] = None

    @field_validator("fetched_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def find_job(self, job_id: str) -> Optional[IngestedJob]:
        """Return the ingested job with this id, if present."""
        for job in self.jobs:
            if job.id == job_id:
                return job
        return None


class TrackedCompany(BaseModel):
    """A company whose job board the user watches."""

    id: str = Field(..., min_length=1, description="Unique company identifier")
    name: str = Field(..., min_length=1, description="Display name")
    provider: Provider = Field(Provider.GREENHOUSE, validate_default=True, description="Board provider")
    board_slug: Optional[str] = Field(None, description="Board identifier at the provider")
    domain: str = Field("", description="Company web domain (for logos)")
    careers_url: str = Field("", description="Public careers page")

    @field_validator("id", "name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("board_slug")
    @classmethod
    def normalize_slug(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip().lower()
        return stripped or None

    @property
    def is_fetchable(self) -> bool:
        """Whether the refresh loop can fetch postings for this company."""
        return self.provider != Provider.CUSTOM and bool(self.board_slug)

    model_config = {"use_enum_values": True}


class UserProfile(BaseModel):
    """The user's role queries and tracked companies."""

    role_queries: List[str] = Field(default_factory=list)
    companies: List[TrackedCompany] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def find_company(self, company_id: str) -> Optional[TrackedCompany]:
        for company in self.companies:
            if company.id == company_id:
                return company
        return None


class TrackedJobStatus(str, Enum):
    """Lifecycle of a pinned job. Closed jobs may reopen if the id reappears."""

    OPEN = "open"
    CHANGED = "changed"
    CLOSED = "closed"


class TrackedJob(BaseModel):
    """A job the user pinned, with a snapshot of its last-known fields."""

    job_id: str
    company_id: str
    company_name: str = ""
    title: str = ""
    url: str = ""
    location: str = ""
    status: TrackedJobStatus = Field(TrackedJobStatus.OPEN, validate_default=True)
    last_checked_at: datetime
    last_seen_at: datetime

    @field_validator("title", "url", "location", mode="before")
    @classmethod
    def default_text(cls, v: Any) -> str:
        return _text_or_empty(v)

    @field_validator("last_checked_at", "last_seen_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    model_config = {"use_enum_values": True}
