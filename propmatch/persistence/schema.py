"""Database schema definition and ORM models.

This module defines SQLAlchemy ORM models for the database schema and provides
conversion methods between ORM models and domain models.
"""

import logging
from typing import Any, Dict

from sqlalchemy import JSON, Column, Float, Index, Integer, String, Text, UniqueConstraint, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from propmatch.domain.models import DemandProfile, Listing, NotificationRecord
from propmatch.utils.timestamps import from_storage, to_storage

logger = logging.getLogger(__name__)

# Create base class for ORM models
Base = declarative_base()


class ListingModel(Base):
    """ORM model for listings table."""

    __tablename__ = "listings"

    id = Column(String(64), primary_key=True, nullable=False)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    operation_type = Column(String(20), nullable=False)
    property_type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="available")

    price = Column(Float, nullable=False)
    bedrooms = Column(Integer, nullable=True)
    bathrooms = Column(Integer, nullable=True)
    area = Column(Float, nullable=False)

    location = Column(String(255), nullable=False, default="")
    address = Column(Text, nullable=True)
    features = Column(JSON, nullable=False, default=list)
    created_by = Column(String(255), nullable=True)

    # Timestamps (stored as ISO 8601 strings, sortable)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=True)

    __table_args__ = (
        Index("idx_listings_created_at", "created_at"),
        Index("idx_listings_kind", "operation_type", "property_type"),
    )

    def to_domain(self) -> Listing:
        """Convert ORM model to domain model."""
        return Listing(
            id=self.id,
            title=self.title,
            description=self.description or "",
            operation_type=self.operation_type,
            property_type=self.property_type,
            status=self.status,
            price=self.price,
            bedrooms=self.bedrooms,
            bathrooms=self.bathrooms,
            area=self.area,
            location=self.location or "",
            address=self.address,
            features=list(self.features or []),
            created_by=self.created_by,
            created_at=from_storage(self.created_at),
            updated_at=from_storage(self.updated_at),
        )

    @classmethod
    def from_domain(cls, listing: Listing) -> "ListingModel":
        """Create ORM model from domain model."""
        return cls(id=listing.id, **_listing_columns(listing))

    def apply_domain(self, listing: Listing) -> None:
        """Overwrite every column except the primary key."""
        for column, value in _listing_columns(listing).items():
            setattr(self, column, value)


def _listing_columns(listing: Listing) -> Dict[str, Any]:
    return {
        "title": listing.title,
        "description": listing.description,
        "operation_type": listing.operation_type.value,
        "property_type": listing.property_type.value,
        "status": listing.status.value,
        "price": listing.price,
        "bedrooms": listing.bedrooms,
        "bathrooms": listing.bathrooms,
        "area": listing.area,
        "location": listing.location,
        "address": listing.address,
        "features": list(listing.features),
        "created_by": listing.created_by,
        "created_at": to_storage(listing.created_at),
        "updated_at": to_storage(listing.updated_at),
    }


class DemandProfileModel(Base):
    """ORM model for demand_profiles table.

    Numeric bounds are nullable; NULL means unbounded on that side.
    """

    __tablename__ = "demand_profiles"

    id = Column(String(64), primary_key=True, nullable=False)

    name = Column(String(255), nullable=False)
    contact_handle = Column(String(64), nullable=False)
    email = Column(String(255), nullable=True)
    operation_type = Column(String(20), nullable=False, default="both")
    location_preference = Column(String(255), nullable=True)

    budget_min = Column(Float, nullable=True)
    budget_max = Column(Float, nullable=True)
    rooms_min = Column(Float, nullable=True)
    rooms_max = Column(Float, nullable=True)
    bathrooms_min = Column(Float, nullable=True)
    bathrooms_max = Column(Float, nullable=True)
    area_min = Column(Float, nullable=True)
    area_max = Column(Float, nullable=True)

    desired_features = Column(JSON, nullable=False, default=list)

    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=True)

    __table_args__ = (Index("idx_demand_profiles_created_at", "created_at"),)

    def to_domain(self) -> DemandProfile:
        """Convert ORM model to domain model."""
        return DemandProfile(
            id=self.id,
            name=self.name,
            contact_handle=self.contact_handle,
            email=self.email,
            operation_type=self.operation_type,
            location_preference=self.location_preference,
            budget_min=self.budget_min,
            budget_max=self.budget_max,
            rooms_min=self.rooms_min,
            rooms_max=self.rooms_max,
            bathrooms_min=self.bathrooms_min,
            bathrooms_max=self.bathrooms_max,
            area_min=self.area_min,
            area_max=self.area_max,
            desired_features=list(self.desired_features or []),
            created_at=from_storage(self.created_at),
            updated_at=from_storage(self.updated_at),
        )

    @classmethod
    def from_domain(cls, profile: DemandProfile) -> "DemandProfileModel":
        """Create ORM model from domain model."""
        return cls(id=profile.id, **_profile_columns(profile))

    def apply_domain(self, profile: DemandProfile) -> None:
        """Overwrite every column except the primary key."""
        for column, value in _profile_columns(profile).items():
            setattr(self, column, value)


def _profile_columns(profile: DemandProfile) -> Dict[str, Any]:
    return {
        "name": profile.name,
        "contact_handle": profile.contact_handle,
        "email": profile.email,
        "operation_type": profile.operation_type.value,
        "location_preference": profile.location_preference,
        "budget_min": profile.budget_min,
        "budget_max": profile.budget_max,
        "rooms_min": profile.rooms_min,
        "rooms_max": profile.rooms_max,
        "bathrooms_min": profile.bathrooms_min,
        "bathrooms_max": profile.bathrooms_max,
        "area_min": profile.area_min,
        "area_max": profile.area_max,
        "desired_features": list(profile.desired_features),
        "created_at": to_storage(profile.created_at),
        "updated_at": to_storage(profile.updated_at),
    }


class NotificationModel(Base):
    """ORM model for notifications table.

    Rows are pending outbound messages. The unique constraint on
    (listing_id, demand_profile_id) guarantees one notification per pair.
    """

    __tablename__ = "notifications"

    id = Column(String(64), primary_key=True, nullable=False)
    listing_id = Column(String(64), nullable=False)
    demand_profile_id = Column(String(64), nullable=False)

    # Snapshot of the pair at emission time
    profile_name = Column(String(255), nullable=False)
    contact_handle = Column(String(64), nullable=False)
    listing_title = Column(Text, nullable=False)
    listing_price = Column(Float, nullable=False)

    rendered_message = Column(Text, nullable=False)
    outbound_url = Column(Text, nullable=False)

    created_at = Column(String(50), nullable=False)
    created_by = Column(String(255), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "listing_id", "demand_profile_id", name="uq_notifications_listing_profile"
        ),
        Index("idx_notifications_created_at", "created_at"),
    )

    def to_domain(self) -> NotificationRecord:
        """Convert ORM model to domain model."""
        return NotificationRecord(
            id=self.id,
            listing_id=self.listing_id,
            demand_profile_id=self.demand_profile_id,
            profile_name=self.profile_name,
            contact_handle=self.contact_handle,
            listing_title=self.listing_title,
            listing_price=self.listing_price,
            rendered_message=self.rendered_message,
            outbound_url=self.outbound_url,
            created_at=from_storage(self.created_at),
            created_by=self.created_by,
        )

    @classmethod
    def to_row(cls, record: NotificationRecord) -> Dict[str, Any]:
        """Column values for a Core insert statement."""
        return {
            "id": record.id,
            "listing_id": record.listing_id,
            "demand_profile_id": record.demand_profile_id,
            "profile_name": record.profile_name,
            "contact_handle": record.contact_handle,
            "listing_title": record.listing_title,
            "listing_price": record.listing_price,
            "rendered_message": record.rendered_message,
            "outbound_url": record.outbound_url,
            "created_at": to_storage(record.created_at),
            "created_by": record.created_by,
        }

    @classmethod
    def from_domain(cls, record: NotificationRecord) -> "NotificationModel":
        """Create ORM model from domain model."""
        return cls(**cls.to_row(record))


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)

        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")

    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
