"""Listing search: multi-criteria filtering with stable sorting.

This module provides:
- FilterCriteria: lenient, validated search request
- SortKey: supported result orderings
- ListingFilter: evaluates listings against criteria
- filter_and_sort: functional entry point used by the catalog service
"""

from .engine import ListingFilter, collect_features, filter_and_sort, sort_listings
from .models import DEFAULT_SORT_KEY, FilterCriteria, SortKey, resolve_sort_key

__all__ = [
    "FilterCriteria",
    "SortKey",
    "DEFAULT_SORT_KEY",
    "resolve_sort_key",
    "ListingFilter",
    "filter_and_sort",
    "sort_listings",
    "collect_features",
]
