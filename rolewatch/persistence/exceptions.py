"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers can catch
every storage failure with a single except clause.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL
    - Database file not accessible
    - Store used before init_database()
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a stored value cannot be written or decoded.

    Examples:
    - Constraint violation on write
    - Stored document is not valid JSON
    - Stored document no longer matches the state models
    """

    pass
