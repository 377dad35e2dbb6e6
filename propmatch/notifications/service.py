"""Notification emitter for newly published listings.

This module provides the NotificationService class that turns the result of
a demand match pass into NotificationRecords and hands them to the
notification store:

1. Build the message context for each (listing, profile) pair
2. Render the message template
3. Build the pre-addressed conversation link
4. Persist each record at most once via the store's conditional insert

Emission is pure and retry-safe: record ids are derived from the pair and the
service keeps no state between calls, so rerunning a pass for the same
listing yields the same records and the store discards them as duplicates.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from propmatch.config.models import CatalogConfig, MessagingConfig
from propmatch.domain.models import DemandProfile, Listing, NotificationRecord
from propmatch.logging import get_logger
from propmatch.logging.context import log_context
from propmatch.persistence.repositories import NotificationRepository
from propmatch.utils.hashing import compute_notification_id
from propmatch.utils.timestamps import utc_now

from .messaging import OutboundChannel
from .models import EmissionResult, NotificationError
from .payloads import build_message_context
from .templates import MessageRenderer

logger = get_logger(__name__, component="notification")


class NotificationService:
    """Builds and stores notification records for matched demand profiles.

    The service never delivers messages. Each record carries the rendered
    text and a conversation link; staff send it from the pending queue and
    the record is then removed.
    """

    def __init__(
        self,
        catalog_config: Optional[CatalogConfig] = None,
        messaging_config: Optional[MessagingConfig] = None,
        renderer: Optional[MessageRenderer] = None,
        channel: Optional[OutboundChannel] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notification service.

        Args:
            catalog_config: Catalog settings used in messages (defaults if None)
            messaging_config: Messaging channel settings (defaults if None)
            renderer: Message renderer instance (creates default if None)
            channel: Outbound channel (built from messaging_config if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.catalog_config = catalog_config or CatalogConfig()
        self.messaging_config = messaging_config or MessagingConfig()
        self.renderer = renderer or MessageRenderer()
        self.channel = channel or OutboundChannel(self.messaging_config.channel_base_url)
        self.logger = logger_instance or logger

    def build_record(
        self,
        listing: Listing,
        profile: DemandProfile,
        created_at: Optional[datetime] = None,
        created_by: Optional[str] = None,
    ) -> NotificationRecord:
        """Build the notification record for one (listing, profile) pair.

        Raises:
            NotificationTemplateError: If the message cannot be rendered
            InvalidContactHandleError: If the profile's contact handle has no digits
        """
        context = build_message_context(listing, profile, self.catalog_config)
        message = self.renderer.render(context)
        outbound_url = self.channel.conversation_url(profile.contact_handle, message)

        return NotificationRecord(
            id=compute_notification_id(listing.id, profile.id),
            listing_id=listing.id,
            demand_profile_id=profile.id,
            profile_name=profile.name,
            contact_handle=profile.contact_handle,
            listing_title=listing.title,
            listing_price=listing.price,
            rendered_message=message,
            outbound_url=outbound_url,
            created_at=created_at or utc_now(),
            created_by=created_by,
        )

    def emit_notifications(
        self,
        listing: Listing,
        matched_profiles: Iterable[DemandProfile],
        created_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[NotificationRecord]:
        """Build one record per matched profile, in match order.

        A profile whose record cannot be built (bad contact handle, template
        failure) is logged and skipped; the remaining profiles still get
        their records.

        Args:
            listing: Newly published listing
            matched_profiles: Profiles selected by the demand matcher
            created_by: Staff member who published the listing
            now: Timestamp for all records (defaults to current UTC time)

        Returns:
            List of NotificationRecord objects
        """
        created_at = now or utc_now()
        records: List[NotificationRecord] = []

        with log_context(listing_id=listing.id):
            for profile in matched_profiles:
                try:
                    records.append(
                        self.build_record(listing, profile, created_at, created_by)
                    )
                except NotificationError as e:
                    self.logger.warning(
                        f"Skipping notification for profile {profile.id}: {e}",
                        extra={
                            "event": "notification.skip",
                            "demand_profile_id": profile.id,
                            "error_type": type(e).__name__,
                        },
                    )

        return records

    def persist_notifications(
        self,
        records: Iterable[NotificationRecord],
        notification_repo: NotificationRepository,
        listing_id: Optional[str] = None,
    ) -> EmissionResult:
        """Store records through the notification store's conditional insert.

        The caller owns the session and commits it. Persistence errors are
        not caught here.

        Args:
            records: Records produced by emit_notifications
            notification_repo: Notification repository bound to the caller's session
            listing_id: Listing id for the result (taken from the records if None)

        Returns:
            EmissionResult with created and duplicate counts

        Raises:
            PersistenceError: If the store fails
        """
        records = list(records)
        result = EmissionResult(
            listing_id=listing_id or (records[0].listing_id if records else ""),
            emitted_count=len(records),
        )

        for record in records:
            if notification_repo.upsert_if_absent(record):
                result.created_count += 1
                self.logger.info(
                    f"Notification queued for {record.profile_name} "
                    f"(listing {record.listing_id})",
                    extra={
                        "event": "notification.created",
                        "notification_id": record.id,
                        "demand_profile_id": record.demand_profile_id,
                    },
                )
            else:
                result.duplicate_count += 1
                self.logger.info(
                    f"Notification already exists for profile {record.demand_profile_id} "
                    f"and listing {record.listing_id}",
                    extra={
                        "event": "notification.duplicate",
                        "notification_id": record.id,
                    },
                )

        self.logger.info(
            f"Notification batch complete: {result.created_count} created, "
            f"{result.duplicate_count} duplicates (total: {result.emitted_count})"
        )
        return result
