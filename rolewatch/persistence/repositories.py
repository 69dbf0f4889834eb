"""Data access for state entries.

The repository works on raw JSON text; encoding and decoding documents is
the StateStore's job.
"""

from datetime import datetime
from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rolewatch.logging import get_logger
from rolewatch.utils.timestamps import format_timestamp, utc_now

from .exceptions import DataIntegrityError, PersistenceError
from .schema import StateEntryModel

logger = get_logger(__name__, component="database")


class StateEntryRepository:
    """Repository for key/value state entries."""

    def __init__(self, session: Session):
        self.session = session

    def get_many(self, keys: Iterable[str]) -> Dict[str, str]:
        """Return the stored JSON text for each requested key that exists.

        Raises:
            PersistenceError: If database error occurs
        """
        keys = list(keys)
        if not keys:
            return {}

        try:
            stmt = select(StateEntryModel).where(StateEntryModel.key.in_(keys))
            return {row.key: row.value for row in self.session.execute(stmt).scalars()}
        except SQLAlchemyError as e:
            logger.error(f"Error loading state entries {keys}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to load state entries: {e}") from e

    def upsert(self, key: str, value: str, updated_at: Optional[datetime] = None) -> None:
        """Insert or replace the JSON text stored under key.

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        stamp = format_timestamp(updated_at or utc_now())
        try:
            existing = self.session.get(StateEntryModel, key)
            if existing:
                existing.value = value
                existing.updated_at = stamp
            else:
                self.session.add(StateEntryModel(key=key, value=value, updated_at=stamp))
            self.session.flush()
        except IntegrityError as e:
            logger.error(f"Integrity error saving state entry {key}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to save state entry '{key}': {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error saving state entry {key}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to save state entry: {e}") from e
