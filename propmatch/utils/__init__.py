"""Utility functions for identifiers, time handling, text and numeric parsing."""

from .hashing import compute_notification_id, hash_string, new_entity_id
from .numbers import format_figure, parse_amount, parse_bound, within_bounds
from .text import any_contains, clean_optional, contains, fold, split_terms
from .timestamps import (
    ensure_utc,
    format_timestamp,
    from_storage,
    parse_iso_datetime,
    to_storage,
    utc_now,
)

__all__ = [
    # Identifiers
    "new_entity_id",
    "compute_notification_id",
    "hash_string",
    # Numbers
    "parse_bound",
    "parse_amount",
    "within_bounds",
    "format_figure",
    # Text
    "fold",
    "contains",
    "any_contains",
    "split_terms",
    "clean_optional",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "format_timestamp",
    "to_storage",
    "from_storage",
]
