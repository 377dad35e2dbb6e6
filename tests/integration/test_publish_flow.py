"""Integration tests for the publish -> match -> notify flow.

Uses the bundled sample catalog and a real SQLite file database so that
every layer (validation, stores, matcher, renderer, channel) runs for real.
"""

from pathlib import Path
from urllib.parse import unquote

import pytest
import yaml

from propmatch.config.models import AppConfig
from propmatch.domain.models import DemandProfile, ListingDraft, ListingUpdate
from propmatch.filtering import FilterCriteria
from propmatch.matching import MatchingRules
from propmatch.persistence import close_database, get_session, init_database
from propmatch.persistence.repositories import NotificationRepository
from propmatch.pipeline import CatalogService

SAMPLE_CATALOG = Path(__file__).resolve().parents[2] / "docs" / "sample_catalog.yaml"


@pytest.fixture
def sample():
    with open(SAMPLE_CATALOG, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def file_database(tmp_path):
    init_database(f"sqlite:///{tmp_path / 'catalog.db'}")
    yield
    close_database()


@pytest.fixture
def catalog(file_database):
    config = AppConfig().with_base_url("https://propiedades.example.cl")
    return CatalogService(config)


def publish_sample(catalog, sample):
    for raw_profile in sample["profiles"]:
        catalog.register_profile(DemandProfile.model_validate(raw_profile))
    return [
        catalog.create_listing(ListingDraft.model_validate(raw), created_by="ana")
        for raw in sample["listings"]
    ]


class TestSampleCatalog:
    """End-to-end runs over the sample catalog."""

    def test_notifications_per_listing(self, catalog, sample):
        """Test each listing notifies exactly the compatible profiles."""
        results = publish_sample(catalog, sample)

        notified = {
            result.listing.title: sorted(
                record.profile_name
                for record in catalog.pending_notifications()
                if record.listing_id == result.listing.id
            )
            for result in results
        }

        assert notified == {
            "Departamento en Las Condes": ["María González"],
            "Casa en Providencia": ["Ana Soto", "Pedro Rojas"],
            "Terreno en Colina": ["Ana Soto"],
        }
        assert catalog.count_pending() == 4
        assert not any(result.notifications_failed for result in results)

    def test_message_and_link_content(self, catalog, sample):
        """Test the queued message is rendered and embedded in the link."""
        publish_sample(catalog, sample)

        record = next(
            r for r in catalog.pending_notifications() if r.profile_name == "María González"
        )

        assert "Hola María González!" in record.rendered_message
        assert "$150.000.000" in record.rendered_message
        assert "https://propiedades.example.cl/listing/" in record.rendered_message
        assert record.outbound_url.startswith("https://wa.me/+56912345678?text=")
        assert unquote(record.outbound_url.split("?text=", 1)[1]) == record.rendered_message
        assert record.created_by == "ana"

    def test_rerun_is_idempotent(self, catalog, sample):
        """Test rerunning every match pass adds no notifications."""
        results = publish_sample(catalog, sample)

        reruns = [catalog.run_match_pass(result.listing) for result in results]

        assert sum(r.created_count for r in reruns) == 0
        assert sum(r.duplicate_count for r in reruns) == 4
        assert catalog.count_pending() == 4

    def test_search_over_published_catalog(self, catalog, sample):
        """Test search over the stored catalog with Spanish labels."""
        publish_sample(catalog, sample)

        sales = catalog.search(FilterCriteria(operation_type="venta", sort_key="price-asc"))
        with_pool = catalog.search(FilterCriteria(features=["piscina"]))
        family = catalog.search(FilterCriteria(bedrooms_min=3))

        assert [listing.title for listing in sales] == [
            "Terreno en Colina",
            "Departamento en Las Condes",
        ]
        assert [listing.title for listing in with_pool] == ["Departamento en Las Condes"]
        # Land has no bedroom count and is not excluded
        assert {listing.title for listing in family} == {
            "Casa en Providencia",
            "Terreno en Colina",
        }

    def test_sending_clears_queue(self, catalog, sample):
        """Test marking every notification sent empties the queue."""
        publish_sample(catalog, sample)

        ids = [record.id for record in catalog.pending_notifications()]

        assert catalog.mark_sent(ids) == 4
        assert catalog.pending_notifications() == []


class TestMatchingRulesEndToEnd:
    """Tests for optional matching rules through the full flow."""

    def test_feature_rule_filters_notifications(self, file_database, sample):
        """Test desired features only matter when the rule is on."""
        config = AppConfig(matching=MatchingRules(check_features=True))
        catalog = CatalogService(config)
        catalog.register_profile(
            DemandProfile(
                name="Lucía", contact_handle="+56 9 5555 0000", desired_features="quincho"
            )
        )

        results = publish_sample(catalog, {"profiles": [], "listings": sample["listings"]})

        notified = [r.listing.title for r in results if r.notified_count]
        assert notified == ["Casa en Providencia"]


def test_edit_does_not_rematch(catalog):
    """Test an edited listing is never matched again, even if it now fits."""
    catalog.register_profile(
        DemandProfile(name="Juan", contact_handle="+56 9 1111 2222", budget_max=100)
    )
    published = catalog.create_listing(
        ListingDraft(
            title="Bodega",
            operation_type="rent",
            property_type="commercial",
            price=500,
            area=20,
        )
    )

    catalog.update_listing(published.listing.id, ListingUpdate(price=90))

    with get_session() as session:
        assert NotificationRepository(session).get_for_listing(published.listing.id) == []
