"""Tests for message context building and conversation links."""

import pytest

from propmatch.config.models import CatalogConfig
from propmatch.notifications import (
    InvalidContactHandleError,
    OutboundChannel,
    build_conversation_url,
    build_listing_url,
    build_message_context,
    clean_contact_handle,
    encode_message,
    format_number,
    format_price,
)
from tests.helpers.factories import make_listing


@pytest.fixture
def catalog_config():
    """Catalog settings with a public base URL."""
    return CatalogConfig(base_url="https://propiedades.example.cl/")


class TestFormatting:
    """Tests for display formatting helpers."""

    @pytest.mark.parametrize(
        "amount,currency,expected",
        [
            (150_000_000, "CLP", "$150.000.000"),
            (850_000, "clp", "$850.000"),
            (999, "CLP", "$999"),
            (1250.5, "USD", "USD 1,250.50"),
        ],
    )
    def test_format_price(self, amount, currency, expected):
        """Test CLP uses dot separators and other currencies their code."""
        assert format_price(amount, currency) == expected

    def test_format_number(self):
        """Test whole numbers drop the decimal part."""
        assert format_number(2.0) == "2"
        assert format_number(78.5) == "78.5"
        assert format_number(None) is None

    def test_build_listing_url(self):
        """Test the deep link tolerates a trailing slash."""
        assert build_listing_url("https://x.cl/", "abc") == "https://x.cl/listing/abc"


class TestMessageContext:
    """Tests for build_message_context."""

    def test_context_fields(self, listing, profile, catalog_config):
        """Test the context carries display values for the template."""
        context = build_message_context(listing, profile, catalog_config)

        assert context["profile_name"] == "María"
        assert context["price_formatted"] == "$150.000.000"
        assert context["operation_label"] == "Venta"
        assert context["property_type_label"] == "Departamento"
        assert context["bedrooms"] == "2"
        assert context["area"] == "78.5"
        assert context["listing_url"] == "https://propiedades.example.cl/listing/listing-1"
        assert context["brand_name"] == "Axtell Propiedades"

    def test_absent_counts_stay_none(self, profile):
        """Test missing bedroom and bathroom counts are None, not '0'."""
        land = make_listing(property_type="land", bedrooms=None, bathrooms=None)

        context = build_message_context(land, profile)

        assert context["bedrooms"] is None
        assert context["bathrooms"] is None
        assert context["listing_url"] == "http://localhost:5173/listing/listing-1"

    def test_large_area_has_no_exponent(self, profile):
        """Test a seven-digit surface renders with thousands separators."""
        parcel = make_listing(property_type="land", bedrooms=None, bathrooms=None, area=1_500_000)

        context = build_message_context(parcel, profile)

        assert context["area"] == "1,500,000"


class TestConversationLinks:
    """Tests for the outbound messaging channel."""

    @pytest.mark.parametrize(
        "handle,expected",
        [
            ("+56 9 1234 5678", "+56912345678"),
            ("(+56) 9-1234-5678", "+56912345678"),
            ("912345678", "912345678"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_clean_contact_handle(self, handle, expected):
        """Test formatting characters are removed from handles."""
        assert clean_contact_handle(handle) == expected

    def test_encode_message(self):
        """Test encoding matches encodeURIComponent for text and emoji."""
        assert encode_message("Hola María!") == "Hola%20Mar%C3%ADa!"
        assert encode_message("a&b=c?") == "a%26b%3Dc%3F"
        assert encode_message("línea\nnueva") == "l%C3%ADnea%0Anueva"

    def test_build_conversation_url(self):
        """Test the link addresses the cleaned phone number."""
        url = build_conversation_url("+56 9 1234 5678", "Hola María!")

        assert url == "https://wa.me/+56912345678?text=Hola%20Mar%C3%ADa!"

    def test_custom_channel_base_url(self):
        """Test the channel base URL is configurable."""
        channel = OutboundChannel("https://chat.example.com/")

        assert channel.conversation_url("912345678", "Hola") == (
            "https://chat.example.com/912345678?text=Hola"
        )

    @pytest.mark.parametrize("handle", ["", "   ", "sin teléfono", "+"])
    def test_handle_without_digits_rejected(self, handle):
        """Test a handle with no digits cannot produce a link."""
        with pytest.raises(InvalidContactHandleError):
            build_conversation_url(handle, "Hola")
