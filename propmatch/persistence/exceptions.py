"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers on the
best-effort notification path can catch every store failure at once.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when the database cannot be initialized or reached.

    Examples:
    - Invalid database URL
    - Database file not accessible
    - Session requested before init_database()
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an update targets a listing or profile that does not exist.

    Plain lookups return None instead of raising this.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised on constraint violations other than the notification pair
    uniqueness, which upsert_if_absent reports as a duplicate instead.

    Examples:
    - Duplicate listing or profile id
    - NOT NULL violation
    """

    pass
