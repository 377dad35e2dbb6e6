"""Unit tests for domain models and the label vocabulary."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from propmatch.domain.enums import DemandOperation, ListingStatus, OperationType, PropertyType
from propmatch.domain.models import (
    DemandProfile,
    ListingDraft,
    ListingUpdate,
    NotificationRecord,
)
from propmatch.domain.vocabulary import (
    operation_display,
    property_type_display,
    resolve_demand_operation,
    resolve_operation_type,
    resolve_property_type,
)
from tests.helpers.factories import make_listing, make_profile


class TestVocabulary:
    """Tests for resolving English and Spanish labels."""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("house", PropertyType.HOUSE),
            ("Casa", PropertyType.HOUSE),
            ("apartamento", PropertyType.APARTMENT),
            ("DEPARTAMENTO", PropertyType.APARTMENT),
            ("local comercial", PropertyType.COMMERCIAL),
            ("terreno", PropertyType.LAND),
            (PropertyType.LAND, PropertyType.LAND),
            ("castillo", None),
            (None, None),
        ],
    )
    def test_property_type_labels(self, label, expected):
        """Test property labels from both vocabularies resolve to one enum."""
        assert resolve_property_type(label) == expected

    def test_operation_labels(self):
        """Test operation labels resolve for listings and profiles."""
        assert resolve_operation_type("Arriendo") == OperationType.RENT
        assert resolve_operation_type("both") is None
        assert resolve_demand_operation("ambas") == DemandOperation.BOTH

    def test_display_labels(self):
        """Test canonical values render as Spanish display labels."""
        assert operation_display(OperationType.SALE) == "Venta"
        assert property_type_display("commercial") == "Local Comercial"


class TestListingDraft:
    """Tests for ListingDraft validation and build."""

    def test_build_assigns_id_and_timestamp(self):
        """Test build assigns a fresh id and a UTC creation time."""
        draft = ListingDraft(
            title="  Casa en Ñuñoa ",
            operation_type="venta",
            property_type="casa",
            price=200_000_000,
            area=120,
        )

        listing = draft.build()

        assert listing.title == "Casa en Ñuñoa"
        assert len(listing.id) == 32
        assert listing.created_at.tzinfo == timezone.utc
        assert listing.status == ListingStatus.AVAILABLE
        assert listing.bedrooms is None

    def test_build_with_explicit_values(self):
        """Test explicit id and naive creation time are honoured."""
        draft = ListingDraft(
            title="Terreno", operation_type="sale", property_type="land", price=1, area=1
        )

        listing = draft.build(listing_id="abc", created_at=datetime(2024, 1, 1))

        assert listing.id == "abc"
        assert listing.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("title", "   "),
            ("operation_type", "permuta"),
            ("property_type", "castillo"),
            ("price", -1),
            ("area", 0),
            ("bedrooms", -2),
        ],
    )
    def test_invalid_drafts_rejected(self, field, value):
        """Test invalid required fields raise ValidationError."""
        data = {
            "title": "Casa",
            "operation_type": "sale",
            "property_type": "house",
            "price": 100,
            "area": 50,
        }
        data[field] = value

        with pytest.raises(ValidationError):
            ListingDraft(**data)

    def test_features_and_blank_counts_normalized(self):
        """Test comma-separated features are split and blank counts become None."""
        draft = ListingDraft(
            title="Casa",
            operation_type="sale",
            property_type="house",
            price=100,
            area=50,
            bedrooms="",
            features="Quincho, Jardín, quincho",
        )

        assert draft.bedrooms is None
        assert draft.features == ["Quincho", "Jardín"]


class TestListingUpdate:
    """Tests for partial listing edits."""

    def test_apply_replaces_only_set_fields(self, listing):
        """Test unset fields are untouched and identity is preserved."""
        edited_at = datetime(2024, 3, 1, tzinfo=timezone.utc)

        updated = ListingUpdate(price=140_000_000, status="vendida").apply_to(listing, edited_at)

        assert updated.price == 140_000_000
        assert updated.status == ListingStatus.SOLD
        assert updated.title == listing.title
        assert updated.id == listing.id
        assert updated.created_at == listing.created_at
        assert updated.updated_at == edited_at

    def test_apply_does_not_mutate_original(self, listing):
        """Test apply_to returns a new listing."""
        ListingUpdate(title="Otro título").apply_to(listing)

        assert listing.title == "Departamento en Las Condes"
        assert listing.updated_at is None

    def test_invalid_label_rejected(self):
        """Test unknown labels are rejected on update."""
        with pytest.raises(ValidationError):
            ListingUpdate(property_type="castillo")


class TestDemandProfile:
    """Tests for DemandProfile validation."""

    def test_defaults(self):
        """Test a minimal profile gets an id, 'both' and no bounds."""
        profile = DemandProfile(name="Juan", contact_handle="+56 9 8765 4321")

        assert profile.id
        assert profile.operation_type == DemandOperation.BOTH
        assert profile.budget_min is None
        assert profile.desired_features == []

    def test_inverted_bounds_accepted(self):
        """Test min greater than max is accepted as-is."""
        profile = make_profile(budget_min=10, budget_max=5)

        assert profile.budget_min == 10
        assert profile.budget_max == 5

    def test_blank_bounds_become_none(self):
        """Test empty form fields become absent bounds."""
        profile = make_profile(budget_max="", rooms_min=" ")

        assert profile.budget_max is None
        assert profile.rooms_min is None

    def test_desired_features_from_text(self):
        """Test comma-separated desired features are split."""
        assert make_profile(desired_features="piscina, quincho").desired_features == [
            "piscina",
            "quincho",
        ]

    def test_empty_contact_rejected(self):
        """Test an empty contact handle is rejected."""
        with pytest.raises(ValidationError):
            make_profile(contact_handle="  ")

    def test_created_at_converted_to_utc(self):
        """Test a foreign-zone timestamp is converted to UTC."""
        santiago = timezone(timedelta(hours=-3))

        profile = make_profile(created_at=datetime(2024, 1, 1, 9, 0, tzinfo=santiago))

        assert profile.created_at == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestNotificationRecord:
    """Tests for NotificationRecord validation."""

    def test_valid_record(self):
        """Test a complete record validates and stores UTC time."""
        record = NotificationRecord(
            id="x" * 64,
            listing_id="listing-1",
            demand_profile_id="profile-1",
            profile_name="María",
            contact_handle="+56912345678",
            listing_title="Departamento",
            listing_price=1,
            rendered_message="Hola",
            outbound_url="https://wa.me/+56912345678?text=Hola",
            created_at=datetime(2024, 2, 1, 12, 0),
        )

        assert record.created_at.tzinfo == timezone.utc
        assert record.created_by is None

    def test_missing_listing_id_rejected(self):
        """Test an empty listing id is rejected."""
        with pytest.raises(ValidationError):
            NotificationRecord(
                id="x",
                listing_id="",
                demand_profile_id="profile-1",
                profile_name="María",
                contact_handle="+56912345678",
                listing_title="Departamento",
                listing_price=1,
                rendered_message="Hola",
                outbound_url="https://wa.me",
                created_at=datetime(2024, 2, 1),
            )


def test_listing_status_labels():
    """Test Spanish status labels resolve on listings."""
    assert make_listing(status="arrendada").status == ListingStatus.RENTED
