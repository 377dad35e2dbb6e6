"""Data models and exceptions for notification emission.

This module defines the result type and custom exceptions used by the
notification emitter and its persistence hand-off.
"""

from dataclasses import dataclass
from typing import Optional


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when message rendering fails due to configuration or missing variables."""

    pass


class InvalidContactHandleError(NotificationError):
    """Raised when a contact handle has no usable phone digits."""

    pass


@dataclass
class EmissionResult:
    """Outcome of the notification step of one match pass.

    Attributes:
        listing_id: Listing whose match pass produced the notifications
        matched_count: Profiles the matcher selected
        emitted_count: Records built (matched minus skipped)
        created_count: Records newly stored
        duplicate_count: Records already present for their (listing, profile) pair
        skipped_count: Profiles skipped because a record could not be built
        error: Error message if the pass failed as a whole (best-effort path)
    """

    listing_id: str
    matched_count: int = 0
    emitted_count: int = 0
    created_count: int = 0
    duplicate_count: int = 0
    skipped_count: int = 0
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        """True if the notification step did not complete."""
        return self.error is not None
