"""Catalog orchestration: publishing, editing and searching listings."""

from contextlib import AbstractContextManager
from typing import Any, Callable, Iterable, List, Mapping, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from propmatch.config.models import AppConfig
from propmatch.domain.models import (
    DemandProfile,
    Listing,
    ListingDraft,
    ListingUpdate,
    NotificationRecord,
)
from propmatch.filtering import FilterCriteria
from propmatch.logging import get_logger
from propmatch.logging.context import log_context
from propmatch.matching import DemandMatcher
from propmatch.notifications import EmissionResult, NotificationError, NotificationService
from propmatch.persistence.database import get_session
from propmatch.persistence.exceptions import PersistenceError
from propmatch.persistence.repositories import (
    DemandProfileRepository,
    ListingRepository,
    NotificationRepository,
)

from .models import PublishResult

logger = get_logger(__name__, component="catalog")

SessionScope = Callable[[], AbstractContextManager[Session]]


class CatalogService:
    """
    Coordinates the stores with the filter pipeline, demand matcher and
    notification emitter.

    A listing enters the demand matcher exactly once, when it is created.
    Edits never trigger a new match pass. The match pass runs in its own
    session after the listing is committed, and its failures are logged and
    reported without undoing the publish.
    """

    def __init__(
        self,
        app_config: Optional[AppConfig] = None,
        matcher: Optional[DemandMatcher] = None,
        notification_service: Optional[NotificationService] = None,
        session_scope: SessionScope = get_session,
    ):
        """
        Initialize the catalog service.

        Args:
            app_config: Application configuration (defaults if None)
            matcher: Demand matcher (built from app_config.matching if None)
            notification_service: Notification emitter (built from app_config if None)
            session_scope: Context manager factory yielding a transactional session
        """
        self.app_config = app_config or AppConfig()
        self.matcher = matcher or DemandMatcher(self.app_config.matching)
        self.notification_service = notification_service or NotificationService(
            catalog_config=self.app_config.catalog,
            messaging_config=self.app_config.messaging,
        )
        self.session_scope = session_scope

    # Listings

    def create_listing(self, draft: ListingDraft, created_by: Optional[str] = None) -> PublishResult:
        """
        Publish a listing, then run the one-time demand match pass for it.

        Args:
            draft: Validated listing submission
            created_by: Staff member publishing the listing

        Returns:
            PublishResult with the stored listing and notification counts

        Raises:
            PersistenceError: If the listing itself cannot be stored
        """
        if created_by and not draft.created_by:
            draft = draft.model_copy(update={"created_by": created_by})
        listing = draft.build()

        with log_context(listing_id=listing.id):
            with self.session_scope() as session:
                listing = ListingRepository(session).create(listing)

            logger.info(
                f"Listing created: {listing.title}",
                extra={
                    "event": "listing.created",
                    "operation_type": listing.operation_type.value,
                    "property_type": listing.property_type.value,
                    "price": listing.price,
                },
            )

            emission = self.run_match_pass(listing, created_by=created_by or listing.created_by)

        return PublishResult(listing=listing, emission=emission)

    def run_match_pass(self, listing: Listing, created_by: Optional[str] = None) -> EmissionResult:
        """
        Match a listing against every demand profile and queue notifications.

        Best-effort: any failure (store, notification, commit or bad stored
        data) is logged and returned in ``EmissionResult.error``, never raised. Safe to repeat for the same
        listing; pairs that already have a notification are counted as
        duplicates.

        Args:
            listing: Stored listing
            created_by: Staff member recorded on the notifications

        Returns:
            EmissionResult with matched, created and duplicate counts
        """
        result = EmissionResult(listing_id=listing.id)
        run_id = uuid4().hex

        with log_context(listing_id=listing.id, run_id=run_id):
            try:
                with self.session_scope() as session:
                    profiles = DemandProfileRepository(session).list()
                    matched = self.matcher.match(listing, profiles)
                    records = self.notification_service.emit_notifications(
                        listing, matched, created_by=created_by
                    )
                    persisted = self.notification_service.persist_notifications(
                        records, NotificationRepository(session), listing_id=listing.id
                    )

                result = persisted
                result.matched_count = len(matched)
                result.skipped_count = len(matched) - len(records)

            except (PersistenceError, NotificationError) as e:
                result.error = str(e)
                logger.error(
                    f"Notification step failed for listing {listing.id}: {e}",
                    exc_info=True,
                    extra={
                        "event": "notification.pass.failed",
                        "error_type": type(e).__name__,
                    },
                )
                return result

            except Exception as e:
                # Unexpected error in the match pass; the listing is already committed
                result.error = str(e)
                logger.error(
                    f"Unexpected error in match pass for listing {listing.id}: {e}",
                    exc_info=True,
                    extra={
                        "event": "notification.pass.failed",
                        "error_type": type(e).__name__,
                    },
                )
                return result

            logger.info(
                f"Match pass finished: {result.matched_count} matched, "
                f"{result.created_count} queued, {result.duplicate_count} duplicates",
                extra={
                    "event": "notification.pass.completed",
                    "matched_count": result.matched_count,
                    "created_count": result.created_count,
                    "duplicate_count": result.duplicate_count,
                    "skipped_count": result.skipped_count,
                },
            )

        return result

    def update_listing(self, listing_id: str, changes: ListingUpdate) -> Listing:
        """
        Edit a listing. No match pass is run for edits.

        Raises:
            RecordNotFoundError: If the listing does not exist
        """
        with self.session_scope() as session:
            listing = ListingRepository(session).update(listing_id, changes)

        logger.info(
            f"Listing updated: {listing.title}",
            extra={
                "event": "listing.updated",
                "listing_id": listing_id,
                "fields": sorted(changes.model_dump(exclude_unset=True)),
            },
        )
        return listing

    def delete_listing(self, listing_id: str) -> bool:
        """Delete a listing. Returns False if it did not exist."""
        with self.session_scope() as session:
            deleted = ListingRepository(session).delete(listing_id)

        if deleted:
            logger.info(
                "Listing deleted",
                extra={"event": "listing.deleted", "listing_id": listing_id},
            )
        return deleted

    def get_listing(self, listing_id: str) -> Optional[Listing]:
        with self.session_scope() as session:
            return ListingRepository(session).get_by_id(listing_id)

    # Search

    def criteria_from_params(self, params: Mapping[str, Any]) -> FilterCriteria:
        """
        Build search criteria from raw query parameters.

        The configured default sort applies when the parameters name none.
        """
        criteria = FilterCriteria.from_params(params)
        if "sort_key" not in criteria.model_fields_set:
            criteria = criteria.model_copy(
                update={"sort_key": self.app_config.search.default_sort}
            )
        return criteria

    def search(self, criteria: Optional[FilterCriteria] = None) -> List[Listing]:
        """
        Run a catalog search over the current listing snapshot.

        Args:
            criteria: Search criteria (configured defaults if None)

        Returns:
            Matching listings in the requested order
        """
        if criteria is None:
            criteria = self.criteria_from_params({})

        with self.session_scope() as session:
            results = ListingRepository(session).list(criteria)

        logger.info(
            f"Search returned {len(results)} listings",
            extra={
                "event": "search.completed",
                "result_count": len(results),
                "active_criteria": criteria.active_criteria(),
                "sort_key": criteria.sort_key.value,
            },
        )
        return results

    # Demand profiles

    def register_profile(self, profile: DemandProfile) -> DemandProfile:
        """Store a visitor's demand profile. Existing listings are not matched."""
        with self.session_scope() as session:
            stored = DemandProfileRepository(session).create(profile)

        logger.info(
            f"Demand profile registered: {stored.name}",
            extra={
                "event": "profile.registered",
                "demand_profile_id": stored.id,
                "operation_type": stored.operation_type.value,
            },
        )
        return stored

    def list_profiles(self) -> List[DemandProfile]:
        with self.session_scope() as session:
            return DemandProfileRepository(session).list()

    # Pending notifications

    def pending_notifications(self) -> List[NotificationRecord]:
        """Notifications waiting to be sent, newest first."""
        with self.session_scope() as session:
            return NotificationRepository(session).list_pending()

    def count_pending(self) -> int:
        with self.session_scope() as session:
            return NotificationRepository(session).count_pending()

    def mark_sent(self, notification_ids: Iterable[str]) -> int:
        """
        Remove notifications that staff have sent.

        Returns:
            Number of notifications removed (unknown ids are ignored)
        """
        ids = list(notification_ids)
        with self.session_scope() as session:
            removed = NotificationRepository(session).delete_many(ids)

        logger.info(
            f"Marked {removed} notifications as sent",
            extra={
                "event": "notification.sent",
                "requested_count": len(ids),
                "removed_count": removed,
            },
        )
        return removed
