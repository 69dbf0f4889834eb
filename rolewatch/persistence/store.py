"""Key/value state store over the database.

Values are JSON documents. Pydantic models (and lists or dicts of them) are
dumped with ``model_dump(mode="json")`` before encoding, so timestamps are
stored as ISO 8601 strings.
"""

import json
from typing import Any, Dict, Iterable, Mapping

from pydantic import BaseModel

from rolewatch.logging import get_logger

from .database import get_session
from .exceptions import DataIntegrityError
from .repositories import StateEntryRepository

logger = get_logger(__name__, component="store")

PROFILE_KEY = "user_profile"
COMPANY_CACHE_KEY = "company_cache"
TRACKED_JOBS_KEY = "tracked_jobs"
STATE_KEYS = (PROFILE_KEY, COMPANY_CACHE_KEY, TRACKED_JOBS_KEY)


def to_document(value: Any) -> Any:
    """Convert models (nested in lists/dicts) into JSON-compatible data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Mapping):
        return {str(k): to_document(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_document(v) for v in value]
    return value


class StateStore:
    """Persistent store with ``load(keys)`` / ``save(partial)``.

    Each call runs in its own session; ``save`` writes all given keys in one
    transaction.
    """

    def load(self, keys: Iterable[str] = STATE_KEYS) -> Dict[str, Any]:
        """Load the documents stored under keys.

        Missing keys are absent from the result.

        Raises:
            DataIntegrityError: If a stored value is not valid JSON
        """
        with get_session() as session:
            raw = StateEntryRepository(session).get_many(keys)

        documents = {}
        for key, text in raw.items():
            try:
                documents[key] = json.loads(text)
            except ValueError as e:
                raise DataIntegrityError(f"Stored value for '{key}' is not valid JSON: {e}") from e

        logger.debug(
            "Loaded state entries",
            extra={"event": "store.loaded", "keys": sorted(documents)},
        )
        return documents

    def save(self, partial: Mapping[str, Any]) -> None:
        """Write every key in partial, leaving other keys untouched."""
        if not partial:
            return

        encoded = {key: json.dumps(to_document(value)) for key, value in partial.items()}

        with get_session() as session:
            repo = StateEntryRepository(session)
            for key, text in encoded.items():
                repo.upsert(key, text)

        logger.info(
            "Saved state entries",
            extra={"event": "store.saved", "keys": sorted(encoded)},
        )
