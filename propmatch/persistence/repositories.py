"""Data access layer (repositories) for persistence operations.

This module provides repository classes for CRUD operations on listings,
demand profiles and notification records. Repositories encapsulate database
operations and return domain models rather than ORM models.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import delete, func, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from propmatch.domain.models import DemandProfile, Listing, ListingUpdate, NotificationRecord
from propmatch.filtering import FilterCriteria, filter_and_sort
from propmatch.utils.timestamps import utc_now

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import DemandProfileModel, ListingModel, NotificationModel

logger = logging.getLogger(__name__)

# Dialects with a native INSERT ... ON CONFLICT DO NOTHING
_CONFLICT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


class ListingRepository:
    """Repository for listing-related database operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def create(self, listing: Listing) -> Listing:
        """Insert a new listing.

        Raises:
            DataIntegrityError: If a listing with the same id exists
            PersistenceError: If database error occurs
        """
        try:
            model = ListingModel.from_domain(listing)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error creating listing {listing.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to create listing due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating listing {listing.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create listing: {e}") from e

    def get_by_id(self, listing_id: str) -> Optional[Listing]:
        """Retrieve listing by primary key.

        Returns:
            Listing domain model if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(ListingModel, listing_id)
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving listing {listing_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve listing: {e}") from e

    def list(self, criteria: Optional[FilterCriteria] = None) -> List[Listing]:
        """Return listings, newest first.

        Args:
            criteria: Optional search criteria; when given the snapshot is
                passed through filter_and_sort and its sort key applies

        Returns:
            List of Listing domain models

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(ListingModel).order_by(
                ListingModel.created_at.desc(), ListingModel.id
            )
            listings = [model.to_domain() for model in self.session.execute(stmt).scalars()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing listings: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list listings: {e}") from e

        if criteria is None:
            return listings
        return filter_and_sort(listings, criteria)

    def update(self, listing_id: str, changes: ListingUpdate) -> Listing:
        """Apply a partial update to a stored listing.

        Args:
            listing_id: Listing to edit
            changes: Fields to replace

        Returns:
            The updated Listing

        Raises:
            RecordNotFoundError: If the listing does not exist
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(ListingModel, listing_id)
            if model is None:
                raise RecordNotFoundError(f"Listing {listing_id} not found")

            updated = changes.apply_to(model.to_domain())
            model.apply_domain(updated)
            self.session.flush()
            return updated

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating listing {listing_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update listing: {e}") from e

    def delete(self, listing_id: str) -> bool:
        """Delete a listing.

        Returns:
            True if a row was deleted, False if the listing did not exist

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            result = self.session.execute(
                delete(ListingModel).where(ListingModel.id == listing_id)
            )
            self.session.flush()
            return result.rowcount > 0

        except SQLAlchemyError as e:
            logger.error(f"Error deleting listing {listing_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete listing: {e}") from e


class DemandProfileRepository:
    """Repository for demand profile database operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def create(self, profile: DemandProfile) -> DemandProfile:
        """Insert a new demand profile.

        Raises:
            DataIntegrityError: If a profile with the same id exists
            PersistenceError: If database error occurs
        """
        try:
            model = DemandProfileModel.from_domain(profile)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error creating profile {profile.id}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to create demand profile due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating profile {profile.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create demand profile: {e}") from e

    def get_by_id(self, profile_id: str) -> Optional[DemandProfile]:
        """Retrieve a demand profile by id, or None."""
        try:
            model = self.session.get(DemandProfileModel, profile_id)
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving profile {profile_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve demand profile: {e}") from e

    def list(self) -> List[DemandProfile]:
        """Return all demand profiles in registration order.

        This is the snapshot a match pass evaluates.
        """
        try:
            stmt = select(DemandProfileModel).order_by(
                DemandProfileModel.created_at, DemandProfileModel.id
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing demand profiles: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list demand profiles: {e}") from e

    def update(self, profile: DemandProfile) -> DemandProfile:
        """Replace a stored profile with ``profile`` (matched by id).

        Raises:
            RecordNotFoundError: If the profile does not exist
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(DemandProfileModel, profile.id)
            if model is None:
                raise RecordNotFoundError(f"Demand profile {profile.id} not found")

            updated = profile.model_copy(
                update={"created_at": model.to_domain().created_at, "updated_at": utc_now()}
            )
            model.apply_domain(updated)
            self.session.flush()
            return updated

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating profile {profile.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update demand profile: {e}") from e

    def delete(self, profile_id: str) -> bool:
        """Delete a profile. Returns False if it did not exist."""
        try:
            result = self.session.execute(
                delete(DemandProfileModel).where(DemandProfileModel.id == profile_id)
            )
            self.session.flush()
            return result.rowcount > 0

        except SQLAlchemyError as e:
            logger.error(f"Error deleting profile {profile_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete demand profile: {e}") from e


class NotificationRepository:
    """Repository for pending notification records.

    A record lives from its emission until the "send" action removes it.
    """

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def upsert_if_absent(self, record: NotificationRecord) -> bool:
        """Insert the record unless one exists for its (listing, profile) pair.

        Uses a single ``INSERT ... ON CONFLICT DO NOTHING`` on SQLite and
        PostgreSQL so concurrent retries cannot create a second row. Other
        dialects insert inside a savepoint and treat a unique violation as
        "already present".

        Args:
            record: Notification record to store

        Returns:
            True if the record was inserted, False if the pair already had one

        Raises:
            PersistenceError: If database error occurs
        """
        dialect = self.session.get_bind().dialect.name
        conflict_insert = _CONFLICT_INSERTS.get(dialect)

        try:
            if conflict_insert is not None:
                stmt = (
                    conflict_insert(NotificationModel.__table__)
                    .values(**NotificationModel.to_row(record))
                    .on_conflict_do_nothing()
                )
                result = self.session.execute(stmt)
                return result.rowcount == 1

            try:
                with self.session.begin_nested():
                    self.session.execute(
                        insert(NotificationModel.__table__).values(**NotificationModel.to_row(record))
                    )
                return True
            except IntegrityError:
                logger.debug(
                    f"Notification for listing {record.listing_id} and profile "
                    f"{record.demand_profile_id} already exists"
                )
                return False

        except SQLAlchemyError as e:
            logger.error(
                f"Error storing notification {record.id}: {e}",
                exc_info=True,
            )
            raise PersistenceError(f"Failed to store notification: {e}") from e

    def get_by_id(self, notification_id: str) -> Optional[NotificationRecord]:
        """Retrieve a notification by id, or None."""
        try:
            model = self.session.get(NotificationModel, notification_id)
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving notification {notification_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve notification: {e}") from e

    def list_pending(self) -> List[NotificationRecord]:
        """Return every pending notification, newest first."""
        try:
            stmt = select(NotificationModel).order_by(
                NotificationModel.created_at.desc(), NotificationModel.id
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing pending notifications: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list notifications: {e}") from e

    def count_pending(self) -> int:
        """Number of notifications waiting to be sent."""
        try:
            return self.session.execute(
                select(func.count()).select_from(NotificationModel)
            ).scalar_one()

        except SQLAlchemyError as e:
            logger.error(f"Error counting notifications: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count notifications: {e}") from e

    def get_for_listing(self, listing_id: str) -> List[NotificationRecord]:
        """Notifications emitted for one listing, oldest first."""
        try:
            stmt = (
                select(NotificationModel)
                .where(NotificationModel.listing_id == listing_id)
                .order_by(NotificationModel.created_at, NotificationModel.id)
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving notifications for listing {listing_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve notifications: {e}") from e

    def delete(self, notification_id: str) -> bool:
        """Remove one notification (it has been sent).

        Returns:
            True if removed, False if it did not exist
        """
        return self.delete_many([notification_id]) == 1

    def delete_many(self, notification_ids: Iterable[str]) -> int:
        """Remove several notifications in one statement.

        Unknown ids are ignored.

        Returns:
            Number of rows removed
        """
        ids = list(dict.fromkeys(notification_ids))
        if not ids:
            return 0

        try:
            result = self.session.execute(
                delete(NotificationModel).where(NotificationModel.id.in_(ids))
            )
            self.session.flush()
            logger.debug(f"Removed {result.rowcount} of {len(ids)} notifications")
            return result.rowcount

        except SQLAlchemyError as e:
            logger.error(f"Error deleting notifications: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete notifications: {e}") from e
