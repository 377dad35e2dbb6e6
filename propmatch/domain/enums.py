"""Canonical enumerations for the catalog domain."""

from enum import Enum


class OperationType(str, Enum):
    """Commercial operation a listing is offered under."""

    SALE = "sale"
    RENT = "rent"


class DemandOperation(str, Enum):
    """Operation a demand profile is interested in."""

    SALE = "sale"
    RENT = "rent"
    BOTH = "both"


class PropertyType(str, Enum):
    """Kind of property."""

    HOUSE = "house"
    APARTMENT = "apartment"
    COMMERCIAL = "commercial"
    LAND = "land"


class ListingStatus(str, Enum):
    """Availability of a listing."""

    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"
    RENTED = "rented"
