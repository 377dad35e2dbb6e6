"""Identifier helpers for catalog entities.

- new_entity_id: random identifier for listings and demand profiles
- compute_notification_id: deterministic identifier for a (listing, profile) pair,
  so rebuilding the same notification always yields the same id
"""

import hashlib
from uuid import uuid4


def new_entity_id() -> str:
    """Return a fresh opaque identifier (32 hex characters)."""
    return uuid4().hex


def compute_notification_id(listing_id: str, demand_profile_id: str) -> str:
    """Compute the notification id for a listing/profile pair.

    The id is the SHA256 of ``listing_id:demand_profile_id``. Identifiers are
    stripped but otherwise used verbatim; they are opaque and case matters.

    Args:
        listing_id: Listing identifier
        demand_profile_id: Demand profile identifier

    Returns:
        Hexadecimal SHA256 digest (64 characters)
    """
    composite_key = f"{listing_id.strip()}:{demand_profile_id.strip()}"
    return hash_string(composite_key)


def hash_string(value: str) -> str:
    """Compute SHA256 hash of a string value.

    Args:
        value: String to hash

    Returns:
        Hexadecimal string representation of SHA256 hash (64 characters)
    """
    hash_obj = hashlib.sha256(value.encode("utf-8"))
    return hash_obj.hexdigest()
