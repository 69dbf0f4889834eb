"""Domain models for rolewatch."""

from .models import (
    PROVIDERS,
    CompanyCacheEntry,
    IngestedJob,
    Provider,
    RawPosting,
    TrackedCompany,
    TrackedJob,
    TrackedJobStatus,
    UserProfile,
)

__all__ = [
    "PROVIDERS",
    "Provider",
    "RawPosting",
    "IngestedJob",
    "CompanyCacheEntry",
    "TrackedCompany",
    "TrackedJob",
    "TrackedJobStatus",
    "UserProfile",
]
