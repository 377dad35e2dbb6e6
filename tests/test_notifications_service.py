"""Unit tests for NotificationService."""

import logging
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from propmatch.config.models import CatalogConfig, MessagingConfig
from propmatch.notifications import (
    EmissionResult,
    MessageRenderer,
    NotificationService,
    NotificationTemplateError,
)
from propmatch.persistence.exceptions import PersistenceError
from propmatch.utils.hashing import compute_notification_id
from tests.helpers.factories import make_profile

EMITTED_AT = datetime(2024, 2, 1, 12, 5, tzinfo=timezone.utc)


@pytest.fixture
def mock_logger():
    return Mock(spec=logging.Logger)


@pytest.fixture
def service(mock_logger):
    """Notification service with a public base URL and a mock logger."""
    return NotificationService(
        catalog_config=CatalogConfig(base_url="https://propiedades.example.cl"),
        messaging_config=MessagingConfig(),
        logger_instance=mock_logger,
    )


class TestBuildRecord:
    """Tests for building a single notification record."""

    def test_record_fields(self, service, listing, profile):
        """Test the record snapshots the pair, message and link."""
        record = service.build_record(listing, profile, EMITTED_AT, created_by="ana")

        assert record.id == compute_notification_id("listing-1", "profile-1")
        assert record.listing_id == "listing-1"
        assert record.demand_profile_id == "profile-1"
        assert record.profile_name == "María"
        assert record.contact_handle == "+56 9 1234 5678"
        assert record.listing_title == "Departamento en Las Condes"
        assert record.listing_price == 150_000_000
        assert "Hola María!" in record.rendered_message
        assert record.outbound_url.startswith("https://wa.me/+56912345678?text=")
        assert record.created_at == EMITTED_AT
        assert record.created_by == "ana"

    def test_record_is_deterministic(self, service, listing, profile):
        """Test building the same pair twice yields an identical record."""
        first = service.build_record(listing, profile, EMITTED_AT)
        second = service.build_record(listing, profile, EMITTED_AT)

        assert first == second

    def test_default_timestamp(self, service, listing, profile):
        """Test the record defaults to the current UTC time."""
        record = service.build_record(listing, profile)

        assert record.created_at.tzinfo == timezone.utc


class TestEmitNotifications:
    """Tests for emitting records for a set of matched profiles."""

    def test_one_record_per_profile_in_order(self, service, listing):
        """Test records follow the match order."""
        profiles = [make_profile(id="p2", name="Pedro"), make_profile(id="p1", name="Ana")]

        records = service.emit_notifications(listing, profiles, now=EMITTED_AT)

        assert [r.demand_profile_id for r in records] == ["p2", "p1"]
        assert all(r.created_at == EMITTED_AT for r in records)

    def test_no_matches_no_records(self, service, listing):
        """Test an empty match set yields no records."""
        assert service.emit_notifications(listing, []) == []

    def test_bad_contact_handle_is_skipped(self, service, listing, mock_logger):
        """Test a profile without phone digits is skipped with a warning."""
        profiles = [
            make_profile(id="p1"),
            make_profile(id="p2", contact_handle="llamar a recepción"),
            make_profile(id="p3"),
        ]

        records = service.emit_notifications(listing, profiles)

        assert [r.demand_profile_id for r in records] == ["p1", "p3"]
        mock_logger.warning.assert_called_once()
        extra = mock_logger.warning.call_args.kwargs["extra"]
        assert extra["event"] == "notification.skip"
        assert extra["demand_profile_id"] == "p2"
        assert extra["error_type"] == "InvalidContactHandleError"

    def test_template_failure_is_skipped(self, listing, profile, mock_logger):
        """Test a render failure skips the profile instead of raising."""
        renderer = Mock(spec=MessageRenderer)
        renderer.render.side_effect = NotificationTemplateError("boom")
        service = NotificationService(renderer=renderer, logger_instance=mock_logger)

        assert service.emit_notifications(listing, [profile]) == []
        mock_logger.warning.assert_called_once()


class TestPersistNotifications:
    """Tests for handing records to the notification store."""

    def test_counts_created_and_duplicates(self, service, listing):
        """Test inserted and already-present records are counted separately."""
        records = service.emit_notifications(
            listing, [make_profile(id="p1"), make_profile(id="p2")], now=EMITTED_AT
        )
        repo = Mock()
        repo.upsert_if_absent.side_effect = [True, False]

        result = service.persist_notifications(records, repo)

        assert isinstance(result, EmissionResult)
        assert result.listing_id == "listing-1"
        assert result.emitted_count == 2
        assert result.created_count == 1
        assert result.duplicate_count == 1
        assert not result.failed
        assert repo.upsert_if_absent.call_count == 2

    def test_empty_batch(self, service):
        """Test persisting nothing touches no store and reports zero."""
        repo = Mock()

        result = service.persist_notifications([], repo, listing_id="listing-1")

        assert result.listing_id == "listing-1"
        assert result.emitted_count == 0
        repo.upsert_if_absent.assert_not_called()

    def test_store_errors_propagate(self, service, listing, profile):
        """Test persistence errors are left to the caller."""
        records = service.emit_notifications(listing, [profile])
        repo = Mock()
        repo.upsert_if_absent.side_effect = PersistenceError("disk full")

        with pytest.raises(PersistenceError):
            service.persist_notifications(records, repo)
