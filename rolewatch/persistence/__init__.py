"""Persistence layer: SQLAlchemy-backed key/value state store.

Public API:
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine
    - StateStore: load(keys) / save(partial) of JSON documents

Example usage:
    >>> from rolewatch.persistence import init_database, StateStore
    >>> init_database("sqlite:///./data/rolewatch.db")
    >>> store = StateStore()
    >>> store.save({"tracked_jobs": []})
    >>> store.load(["tracked_jobs"])
    {'tracked_jobs': []}
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import DatabaseConnectionError, DataIntegrityError, PersistenceError
from .repositories import StateEntryRepository
from .store import (
    COMPANY_CACHE_KEY,
    PROFILE_KEY,
    STATE_KEYS,
    TRACKED_JOBS_KEY,
    StateStore,
    to_document,
)

__all__ = [
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    "StateEntryRepository",
    "StateStore",
    "to_document",
    "PROFILE_KEY",
    "COMPANY_CACHE_KEY",
    "TRACKED_JOBS_KEY",
    "STATE_KEYS",
    "PersistenceError",
    "DatabaseConnectionError",
    "DataIntegrityError",
]
