"""Persistence layer for listings, demand profiles and notifications (SQLAlchemy).

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - ListingRepository: CRUD operations for listings
    - DemandProfileRepository: CRUD operations for demand profiles
    - NotificationRepository: Conditional insert and removal of pending notifications

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - RecordNotFoundError: Required record not found
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from propmatch.persistence import init_database, get_session, ListingRepository
    >>>
    >>> init_database("sqlite:///./data/propmatch.db")
    >>>
    >>> with get_session() as session:
    ...     listings = ListingRepository(session).list()
"""

# Database initialization and session management
from .database import close_database, get_engine, get_session, init_database

# Repository classes
from .repositories import DemandProfileRepository, ListingRepository, NotificationRepository

# Exceptions
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "ListingRepository",
    "DemandProfileRepository",
    "NotificationRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
