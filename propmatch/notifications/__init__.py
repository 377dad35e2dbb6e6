"""Notification emission for listing/demand matches.

This module provides the notification pipeline:
- NotificationService: Builds NotificationRecords and persists them once per pair
- EmissionResult: Outcome counts of one emission pass
- MessageRenderer: Jinja2-based message template rendering
- OutboundChannel: Pre-addressed conversation links (no delivery)
- Payload utilities: Context builders and display formatting for templates
"""

from .messaging import (
    OutboundChannel,
    build_conversation_url,
    clean_contact_handle,
    encode_message,
)
from .models import (
    EmissionResult,
    InvalidContactHandleError,
    NotificationError,
    NotificationTemplateError,
)
from .payloads import (
    build_listing_url,
    build_message_context,
    format_number,
    format_price,
)
from .service import NotificationService
from .templates import MessageRenderer

__all__ = [
    # Main service
    "NotificationService",
    # Models and results
    "EmissionResult",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "InvalidContactHandleError",
    # Components
    "MessageRenderer",
    "OutboundChannel",
    # Utilities
    "build_conversation_url",
    "build_listing_url",
    "build_message_context",
    "clean_contact_handle",
    "encode_message",
    "format_number",
    "format_price",
]
