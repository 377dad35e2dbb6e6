"""Domain models for the listing catalog."""

from .enums import DemandOperation, ListingStatus, OperationType, PropertyType
from .models import DemandProfile, Listing, ListingDraft, ListingUpdate, NotificationRecord

__all__ = [
    "Listing",
    "ListingDraft",
    "ListingUpdate",
    "DemandProfile",
    "NotificationRecord",
    "OperationType",
    "DemandOperation",
    "PropertyType",
    "ListingStatus",
]
