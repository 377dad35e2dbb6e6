"""Data models for catalog operations and their reporting."""

from dataclasses import dataclass

from propmatch.domain.models import Listing
from propmatch.notifications.models import EmissionResult


@dataclass
class PublishResult:
    """
    Outcome of publishing one listing.

    The listing is stored even when the notification step fails; the failure
    is reported through ``emission.error``.

    Attributes:
        listing: The stored listing
        emission: Counts of the demand match pass and notification hand-off
    """

    listing: Listing
    emission: EmissionResult

    @property
    def notified_count(self) -> int:
        """Notifications newly queued by this publish."""
        return self.emission.created_count

    @property
    def notifications_failed(self) -> bool:
        return self.emission.failed
