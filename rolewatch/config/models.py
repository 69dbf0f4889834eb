"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from rolewatch.domain.models import TrackedCompany
from rolewatch.matching.text import normalize

from .duration import DurationParseError, parse_duration, validate_duration_range


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class LimitsConfig(BaseModel):
    """Caps and thresholds applied to user state and matching."""

    max_queries: int = Field(3, ge=1, le=20, description="Maximum role queries per profile")
    max_companies: int = Field(10, ge=1, le=100, description="Maximum tracked companies")
    max_tracked: int = Field(5, ge=1, le=100, description="Maximum pinned jobs")
    match_threshold: float = Field(
        0.75, gt=0.0, le=1.0, description="Minimum score for a relevant match"
    )
    fresh_days: int = Field(
        7, ge=1, le=365, description="Postings newer than this count toward the badge"
    )
    badge_cap: int = Field(99, ge=1, le=9999, description="Largest badge number shown")


class ProfileSeed(BaseModel):
    """Initial profile used when the store does not hold one yet."""

    role_queries: List[str] = Field(default_factory=list)
    companies: List[TrackedCompany] = Field(default_factory=list)

    @field_validator("role_queries")
    @classmethod
    def dedupe_queries(cls, v: List[str]) -> List[str]:
        """Drop blank queries and duplicates by normalized form, keeping order."""
        seen = set()
        queries = []
        for query in v:
            key = normalize(query)
            if not key or key in seen:
                continue
            seen.add(key)
            queries.append(query.strip())
        return queries


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, validate_default=True, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, validate_default=True, description="json or key-value")

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """HTTP and fetch settings for board adapters."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for board API calls (seconds)"
    )
    user_agent: str = Field("rolewatch/0.1", min_length=1, description="User-Agent header")
    max_jobs_per_company: int = Field(
        0, ge=0, description="Maximum postings kept per company (0 = unlimited)"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object."""

    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    profile: Optional[ProfileSeed] = Field(None, description="Initial profile seed")
    scan_interval: str = Field("30m", description="Polling interval for refreshes")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)

    # Computed field
    scan_interval_seconds: Optional[int] = None

    @field_validator("scan_interval")
    @classmethod
    def validate_scan_interval(cls, v: str) -> str:
        try:
            validate_duration_range(parse_duration(v))
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def validate_profile_and_compute_fields(self):
        """Check the seed profile against limits and compute derived fields."""
        if self.profile is not None:
            if len(self.profile.role_queries) > self.limits.max_queries:
                raise ValueError(
                    f"profile.role_queries has {len(self.profile.role_queries)} entries; "
                    f"maximum is {self.limits.max_queries}"
                )
            if len(self.profile.companies) > self.limits.max_companies:
                raise ValueError(
                    f"profile.companies has {len(self.profile.companies)} entries; "
                    f"maximum is {self.limits.max_companies}"
                )

            seen_ids = set()
            for company in self.profile.companies:
                if company.id in seen_ids:
                    raise ValueError(f"Duplicate company id in profile: {company.id}")
                seen_ids.add(company.id)

        self.scan_interval_seconds = parse_duration(self.scan_interval)
        return self
