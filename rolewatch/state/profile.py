"""Loading stored profiles, including the legacy role-checkbox format."""

from typing import Any, Mapping, Optional

from rolewatch.domain.models import TrackedCompany, UserProfile
from rolewatch.logging import get_logger
from rolewatch.utils.timestamps import parse_provider_date, utc_now

logger = get_logger(__name__, component="state")

# Legacy role flags, in the order their queries are added
LEGACY_ROLE_QUERIES = (
    ("intern", "Software Engineer Intern"),
    ("swe", "Software Engineer"),
    ("ml", "Machine Learning Intern"),
)
DEFAULT_ROLE_QUERY = "Software Engineer"

_CAMEL_CASE_FIELDS = {
    "roleQueries": "role_queries",
    "createdAt": "created_at",
    "boardSlug": "board_slug",
    "careersUrl": "careers_url",
}


def _snake_keys(doc: Mapping[str, Any]) -> dict:
    return {_CAMEL_CASE_FIELDS.get(key, key): value for key, value in doc.items()}


def _companies(raw: Any) -> list:
    return [TrackedCompany.model_validate(_snake_keys(c)) for c in raw or [] if isinstance(c, Mapping)]


def migrate_profile(doc: Optional[Mapping[str, Any]]) -> Optional[UserProfile]:
    """Turn a stored profile document into a UserProfile.

    Current documents carry ``role_queries``. Legacy documents carry
    ``roles`` flags (``intern``, ``swe``, ``ml``) that are converted into
    role queries, defaulting to "Software Engineer" when none apply.

    Args:
        doc: Stored profile document, or None

    Returns:
        UserProfile, or None when there is no usable profile
    """
    if not doc or not isinstance(doc, Mapping):
        return None

    data = _snake_keys(doc)
    created_at = parse_provider_date(data.get("created_at")) or utc_now()

    if isinstance(data.get("role_queries"), list):
        return UserProfile(
            role_queries=data["role_queries"],
            companies=_companies(data.get("companies")),
            created_at=created_at,
        )

    roles = data.get("roles")
    if isinstance(roles, list):
        queries = [query for flag, query in LEGACY_ROLE_QUERIES if flag in roles]
        logger.info(
            "Migrated legacy profile",
            extra={"event": "state.profile.migrated", "roles": roles, "role_queries": queries},
        )
        return UserProfile(
            role_queries=queries or [DEFAULT_ROLE_QUERY],
            companies=_companies(data.get("companies")),
            created_at=created_at,
        )

    return None
