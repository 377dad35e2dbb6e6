"""Core domain models for listings, demand profiles, and notifications.

This module defines the data structures used throughout the application:
- Listing: a published catalog entry, the unit filtered and matched
- ListingDraft: a listing submission before it has an id and timestamp
- ListingUpdate: a partial edit applied to an existing listing
- DemandProfile: a registered visitor's search intent
- NotificationRecord: "this profile should be told about this listing"

Enum fields accept both the canonical English values and the Spanish labels
used by the admin forms (see :mod:`propmatch.domain.vocabulary`).
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from propmatch.utils.hashing import new_entity_id
from propmatch.utils.text import clean_optional, split_terms
from propmatch.utils.timestamps import ensure_utc, utc_now

from .enums import DemandOperation, ListingStatus, OperationType, PropertyType
from .vocabulary import (
    resolve_demand_operation,
    resolve_listing_status,
    resolve_operation_type,
    resolve_property_type,
)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _require_label(value: Any, resolved: Any, allowed: Any) -> Any:
    if resolved is None:
        choices = ", ".join(member.value for member in allowed)
        raise ValueError(f"must be one of {choices} (or a known label), got: {value!r}")
    return resolved


class _ListingFields(BaseModel):
    """Fields and validation shared by Listing and ListingDraft."""

    title: str = Field(..., description="Listing headline")
    description: str = Field("", description="Free-text description")
    operation_type: OperationType = Field(..., description="sale or rent")
    property_type: PropertyType = Field(..., description="house, apartment, commercial, land")
    price: float = Field(..., ge=0, description="Asking price, currency-agnostic")
    bedrooms: Optional[int] = Field(None, ge=0, description="Bedroom count (absent != 0)")
    bathrooms: Optional[int] = Field(None, ge=0, description="Bathroom count (absent != 0)")
    area: float = Field(..., gt=0, description="Surface in square meters")
    location: str = Field("", description="Address/neighborhood/city text used for matching")
    address: Optional[str] = Field(None, description="Street address for display")
    features: List[str] = Field(default_factory=list, description="Free-text features")
    status: ListingStatus = Field(ListingStatus.AVAILABLE, description="Availability")
    created_by: Optional[str] = Field(None, description="Staff member who published it")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        """Strip whitespace from the title."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("description", "location")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> str:
        return (v or "").strip()

    @field_validator("address", "created_by")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return clean_optional(v)

    @field_validator("operation_type", mode="before")
    @classmethod
    def resolve_operation(cls, v: Any) -> Any:
        return _require_label(v, resolve_operation_type(v), OperationType)

    @field_validator("property_type", mode="before")
    @classmethod
    def resolve_property(cls, v: Any) -> Any:
        return _require_label(v, resolve_property_type(v), PropertyType)

    @field_validator("status", mode="before")
    @classmethod
    def resolve_status(cls, v: Any) -> Any:
        if v is None:
            return ListingStatus.AVAILABLE
        return _require_label(v, resolve_listing_status(v), ListingStatus)

    @field_validator("bedrooms", "bathrooms", mode="before")
    @classmethod
    def blank_counts(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("features", mode="before")
    @classmethod
    def normalize_features(cls, v: Any) -> List[str]:
        """Split comma-separated input and drop blank or duplicate features."""
        return split_terms(v)


class Listing(_ListingFields):
    """A published real-estate listing.

    ``id`` and ``created_at`` are assigned once at creation and never change;
    ``created_at`` drives the recency sort and the one-time demand match pass.
    """

    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    created_at: datetime = Field(..., description="When the listing was published (UTC)")
    updated_at: Optional[datetime] = Field(None, description="Last edit (UTC)")

    @field_validator("created_at", "updated_at")
    @classmethod
    def coerce_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    model_config = {"json_schema_extra": {"example": {
        "id": "5f1c0a9e2b7d4c3e8a6f1b2c3d4e5f60",
        "title": "Departamento en Las Condes",
        "description": "Luminoso, vista despejada",
        "operation_type": "sale",
        "property_type": "apartment",
        "price": 150000000,
        "bedrooms": 2,
        "bathrooms": 2,
        "area": 78.5,
        "location": "Las Condes, Santiago",
        "features": ["Piscina", "Estacionamiento"],
        "status": "available",
        "created_at": "2024-02-01T12:00:00Z",
    }}}


class ListingDraft(_ListingFields):
    """A listing as submitted by staff, before it is stored.

    Replaces ad-hoc partial dictionaries: every required field is spelled out
    and validated before the listing enters the engine.
    """

    def build(
        self, listing_id: Optional[str] = None, created_at: Optional[datetime] = None
    ) -> Listing:
        """Create the Listing, assigning an id and creation timestamp.

        Args:
            listing_id: Explicit id (a fresh one is generated when omitted)
            created_at: Explicit creation time (defaults to now, UTC)

        Returns:
            Validated Listing
        """
        return Listing(
            **self.model_dump(),
            id=listing_id or new_entity_id(),
            created_at=created_at or utc_now(),
        )


class ListingUpdate(BaseModel):
    """Partial edit of a listing. Unset fields are left untouched."""

    title: Optional[str] = None
    description: Optional[str] = None
    operation_type: Optional[OperationType] = None
    property_type: Optional[PropertyType] = None
    price: Optional[float] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    area: Optional[float] = Field(None, gt=0)
    location: Optional[str] = None
    address: Optional[str] = None
    features: Optional[List[str]] = None
    status: Optional[ListingStatus] = None

    @field_validator("operation_type", mode="before")
    @classmethod
    def resolve_operation(cls, v: Any) -> Any:
        if v is None:
            return None
        return _require_label(v, resolve_operation_type(v), OperationType)

    @field_validator("property_type", mode="before")
    @classmethod
    def resolve_property(cls, v: Any) -> Any:
        if v is None:
            return None
        return _require_label(v, resolve_property_type(v), PropertyType)

    @field_validator("status", mode="before")
    @classmethod
    def resolve_status(cls, v: Any) -> Any:
        if v is None:
            return None
        return _require_label(v, resolve_listing_status(v), ListingStatus)

    @field_validator("features", mode="before")
    @classmethod
    def normalize_features(cls, v: Any) -> Optional[List[str]]:
        if v is None:
            return None
        return split_terms(v)

    def apply_to(self, listing: Listing, updated_at: Optional[datetime] = None) -> Listing:
        """Return a new Listing with the set fields replaced.

        ``id`` and ``created_at`` are carried over unchanged.
        """
        changes = self.model_dump(exclude_unset=True)
        merged = {**listing.model_dump(), **changes}
        merged["id"] = listing.id
        merged["created_at"] = listing.created_at
        merged["updated_at"] = updated_at or utc_now()
        return Listing.model_validate(merged)


class DemandProfile(BaseModel):
    """A registered visitor's search intent.

    Every bound is optional and inclusive; a missing bound is unbounded on that
    side. Bound pairs are deliberately not checked for ``min <= max``: an
    inverted range is valid input that simply matches no listing.
    """

    id: str = Field(default_factory=new_entity_id, min_length=1)
    name: str = Field(..., description="Display name used in messages")
    contact_handle: str = Field(..., description="Phone number / messaging address")
    email: Optional[str] = Field(None, description="Optional contact email")
    operation_type: DemandOperation = Field(DemandOperation.BOTH)
    location_preference: Optional[str] = Field(None, description="Preferred location text")
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    rooms_min: Optional[float] = None
    rooms_max: Optional[float] = None
    bathrooms_min: Optional[float] = None
    bathrooms_max: Optional[float] = None
    area_min: Optional[float] = None
    area_max: Optional[float] = None
    desired_features: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    @field_validator("name", "contact_handle")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string fields."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("email", "location_preference")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return clean_optional(v)

    @field_validator("operation_type", mode="before")
    @classmethod
    def resolve_operation(cls, v: Any) -> Any:
        if v is None:
            return DemandOperation.BOTH
        return _require_label(v, resolve_demand_operation(v), DemandOperation)

    @field_validator(
        "budget_min",
        "budget_max",
        "rooms_min",
        "rooms_max",
        "bathrooms_min",
        "bathrooms_max",
        "area_min",
        "area_max",
        mode="before",
    )
    @classmethod
    def blank_bounds(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("desired_features", mode="before")
    @classmethod
    def split_features(cls, v: Any) -> List[str]:
        """Accept the comma-separated text typed into the registration form."""
        return split_terms(v)

    @field_validator("created_at", "updated_at")
    @classmethod
    def coerce_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    model_config = {"json_schema_extra": {"example": {
        "id": "c0ffee00c0ffee00c0ffee00c0ffee00",
        "name": "María",
        "contact_handle": "+56 9 1234 5678",
        "operation_type": "both",
        "location_preference": "Condes",
        "budget_min": 100000000,
        "budget_max": 200000000,
        "rooms_min": 1,
        "rooms_max": 3,
        "desired_features": ["piscina", "quincho"],
    }}}


class NotificationRecord(BaseModel):
    """A pending outbound notification for one (listing, demand profile) pair.

    At most one record may exist per pair. The id is derived from the pair,
    so rebuilding a record for the same pair yields the same id.
    """

    id: str = Field(..., description="Deterministic id (hash of listing_id:demand_profile_id)")
    listing_id: str = Field(..., min_length=1)
    demand_profile_id: str = Field(..., min_length=1)
    profile_name: str = Field(..., description="Recipient display name")
    contact_handle: str = Field(..., description="Recipient phone / messaging address")
    listing_title: str = Field(..., description="Title of the matched listing")
    listing_price: float = Field(..., ge=0)
    rendered_message: str = Field(..., description="Message text to send")
    outbound_url: str = Field(..., description="Pre-addressed conversation link")
    created_at: datetime = Field(..., description="When the record was emitted (UTC)")
    created_by: Optional[str] = Field(None, description="Staff member whose publish triggered it")

    @field_validator("created_at")
    @classmethod
    def coerce_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)
