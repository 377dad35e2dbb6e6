"""Tests for Jinja2 message rendering."""

from unittest.mock import patch

import pytest

from propmatch.config.models import CatalogConfig
from propmatch.notifications import (
    InvalidContactHandleError,
    MessageRenderer,
    NotificationTemplateError,
    OutboundChannel,
    build_conversation_url,
    build_message_context,
    clean_contact_handle,
    encode_message,
)
from tests.helpers.factories import make_listing


@pytest.fixture
def catalog_config():
    """Catalog settings with a public base URL."""
    return CatalogConfig(base_url="https://propiedades.example.cl/")


class TestMessageRenderer:
    """Tests for Jinja2 message rendering."""

    def test_render_new_listing_message(self, listing, profile, catalog_config):
        """Test the default template renders every listed detail."""
        message = MessageRenderer().render(build_message_context(listing, profile, catalog_config))

        assert message.startswith("🏠 *Nueva Propiedad Disponible*")
        assert "Hola María!" in message
        assert "*Departamento en Las Condes*" in message
        assert "*Precio:* $150.000.000" in message
        assert "*Tipo:* Departamento en Venta" in message
        assert "*Dormitorios:* 2" in message
        assert "*Baños:* 2" in message
        assert "*Superficie:* 78.5m²" in message
        assert "Luminoso, vista despejada" in message
        assert "https://propiedades.example.cl/listing/listing-1" in message
        assert message.endswith("Tu inmobiliaria de confianza")

    def test_render_omits_absent_fields(self, profile):
        """Test lines for absent counts and empty description are left out."""
        land = make_listing(
            title="Terreno en Colina",
            property_type="land",
            bedrooms=None,
            bathrooms=None,
            description="",
        )

        message = MessageRenderer().render(build_message_context(land, profile))

        assert "Dormitorios" not in message
        assert "Baños" not in message
        assert "Descripción" not in message
        assert "*Tipo:* Terreno en Venta" in message

    def test_missing_variable_raises(self):
        """Test StrictUndefined turns a missing variable into NotificationTemplateError."""
        with pytest.raises(NotificationTemplateError):
            MessageRenderer().render({"profile_name": "María"})

    def test_missing_template_raises(self, listing, profile):
        """Test an unknown template name raises NotificationTemplateError."""
        renderer = MessageRenderer(template_name="missing.txt.j2")

        with pytest.raises(NotificationTemplateError):
            renderer.render(build_message_context(listing, profile))


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


def test_renderer_logs_and_wraps_template_errors():
    """Test rendering errors are logged before being re-raised."""
    with patch("propmatch.notifications.templates.logger") as mock_logger:
        with pytest.raises(NotificationTemplateError):
            MessageRenderer().render({})

    mock_logger.error.assert_called_once()
