"""Outbound messaging channel: pre-addressed conversation links.

The channel never delivers anything. It builds a URL that opens a chat with
the recipient and the message already typed; staff open the link and press
send themselves.
"""

import re
from urllib.parse import quote

from .models import InvalidContactHandleError

DEFAULT_CHANNEL_URL = "https://wa.me"

# Characters JavaScript's encodeURIComponent leaves unescaped (besides alphanumerics)
_URI_COMPONENT_SAFE = "-_.!~*'()"


def clean_contact_handle(contact_handle: str) -> str:
    """Keep only the digits and ``+`` of a phone-style handle.

    Example:
        >>> clean_contact_handle("+56 9 1234-5678")
        '+56912345678'
    """
    return re.sub(r"[^\d+]", "", contact_handle or "")


def encode_message(message: str) -> str:
    """URL-encode message text for use as a query parameter value."""
    return quote(message, safe=_URI_COMPONENT_SAFE)


def build_conversation_url(
    contact_handle: str, message: str, channel_base_url: str = DEFAULT_CHANNEL_URL
) -> str:
    """Build a link that opens a conversation with ``message`` pre-filled.

    Args:
        contact_handle: Recipient phone number in any common formatting
        message: Message text
        channel_base_url: Messaging service base URL

    Returns:
        ``{channel_base_url}/{phone}?text={encoded message}``

    Raises:
        InvalidContactHandleError: If the handle contains no digits
    """
    phone = clean_contact_handle(contact_handle)
    if not re.search(r"\d", phone):
        raise InvalidContactHandleError(
            f"Contact handle {contact_handle!r} has no phone digits"
        )
    return f"{channel_base_url.rstrip('/')}/{phone}?text={encode_message(message)}"


class OutboundChannel:
    """Messaging channel bound to a service base URL."""

    def __init__(self, base_url: str = DEFAULT_CHANNEL_URL):
        self.base_url = base_url

    def conversation_url(self, contact_handle: str, message: str) -> str:
        """See :func:`build_conversation_url`."""
        return build_conversation_url(contact_handle, message, self.base_url)
