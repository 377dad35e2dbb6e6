"""Filter/sort pipeline turning search criteria into an ordered listing subset.

This module implements the search logic that:
1. Evaluates each listing against every active criterion (logical AND)
2. Keeps the listings that pass, in input order
3. Applies a stable sort so ties keep their relative input order

The pipeline is pure: it never mutates the listings it is given, and calling
it twice with the same criteria returns the same result.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from propmatch.domain.models import Listing
from propmatch.utils.text import any_contains, contains, fold
from propmatch.utils.numbers import within_bounds

from .models import FilterCriteria, SortKey

logger = logging.getLogger(__name__)

# (key function, descending)
SORT_ORDERS: Dict[SortKey, Tuple[Callable[[Listing], object], bool]] = {
    SortKey.NEWEST: (lambda listing: listing.created_at, True),
    SortKey.OLDEST: (lambda listing: listing.created_at, False),
    SortKey.PRICE_ASC: (lambda listing: listing.price, False),
    SortKey.PRICE_DESC: (lambda listing: listing.price, True),
    SortKey.AREA_ASC: (lambda listing: listing.area, False),
    SortKey.AREA_DESC: (lambda listing: listing.area, True),
}


class ListingFilter:
    """Evaluates listings against one FilterCriteria.

    Responsibilities:
    - Free-text query over title, description and location
    - Exact operation type, property type and status
    - Inclusive numeric ranges (price, bedrooms, bathrooms, area)
    - Feature requirements (every requested feature must be present)
    - Standalone location substring
    - Stable ordering by the requested sort key
    """

    def __init__(
        self,
        criteria: Optional[FilterCriteria] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize ListingFilter.

        Args:
            criteria: Search criteria (defaults to no constraints, newest first)
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.criteria = criteria or FilterCriteria()
        self.logger = logger_instance or logger

    def rejection_reason(self, listing: Listing) -> Optional[str]:
        """Return the first criterion the listing fails, or None if it passes.

        Bedroom and bathroom bounds are only checked when the listing states a
        value: a listing without a bedroom count is never excluded by a
        bedroom range.

        Args:
            listing: Listing to evaluate

        Returns:
            Name of the failing criterion, or None
        """
        criteria = self.criteria

        if criteria.query and not any_contains(
            (listing.title, listing.description, listing.location), criteria.query
        ):
            return "query"

        if criteria.operation_type is not None and listing.operation_type != criteria.operation_type:
            return "operation_type"

        if criteria.property_type is not None and listing.property_type != criteria.property_type:
            return "property_type"

        if criteria.status is not None and listing.status != criteria.status:
            return "status"

        if not within_bounds(listing.price, criteria.price_min, criteria.price_max):
            return "price"

        if listing.bedrooms is not None and not within_bounds(
            listing.bedrooms, criteria.bedrooms_min, criteria.bedrooms_max
        ):
            return "bedrooms"

        if listing.bathrooms is not None and not within_bounds(
            listing.bathrooms, criteria.bathrooms_min, criteria.bathrooms_max
        ):
            return "bathrooms"

        if not within_bounds(listing.area, criteria.area_min, criteria.area_max):
            return "area"

        for feature in criteria.features:
            if not any_contains(listing.features, feature):
                return f"feature:{feature}"

        if criteria.location and not contains(listing.location, criteria.location):
            return "location"

        return None

    def matches(self, listing: Listing) -> bool:
        """Check whether a listing satisfies every active criterion."""
        return self.rejection_reason(listing) is None

    def apply(self, listings: Iterable[Listing]) -> List[Listing]:
        """Filter and sort listings.

        Args:
            listings: Listings to search (not modified)

        Returns:
            New list of matching listings in sort order
        """
        candidates = list(listings)
        kept = [listing for listing in candidates if self.matches(listing)]
        ordered = sort_listings(kept, self.criteria.sort_key)

        self.logger.debug(
            f"Filtered {len(candidates)} listings down to {len(ordered)}",
            extra={
                "event": "filter.applied",
                "input_count": len(candidates),
                "result_count": len(ordered),
                "active_criteria": self.criteria.active_criteria(),
                "sort_key": self.criteria.sort_key.value,
            },
        )
        return ordered


def sort_listings(listings: Iterable[Listing], sort_key: SortKey = SortKey.NEWEST) -> List[Listing]:
    """Return listings ordered by ``sort_key``.

    ``sorted`` is stable, including with ``reverse=True``, so listings with
    equal keys keep their relative input order.
    """
    key_func, descending = SORT_ORDERS[SortKey(sort_key)]
    return sorted(listings, key=key_func, reverse=descending)


def filter_and_sort(
    listings: Iterable[Listing], criteria: Optional[FilterCriteria] = None
) -> List[Listing]:
    """Turn a search request into an ordered subset of listings.

    Args:
        listings: Snapshot of listings to search
        criteria: Search criteria (None means no constraints, newest first)

    Returns:
        Matching listings in the requested order

    Example:
        >>> filter_and_sort(listings, FilterCriteria(price_max=120_000_000))
    """
    return ListingFilter(criteria).apply(listings)


def collect_features(listings: Iterable[Listing]) -> List[str]:
    """Distinct features across listings, for the search form's feature picker.

    Duplicates are detected case-insensitively; the first spelling is kept and
    the result is sorted alphabetically (case-insensitive).
    """
    seen: Dict[str, str] = {}
    for listing in listings:
        for feature in listing.features:
            seen.setdefault(fold(feature), feature)
    return [seen[key] for key in sorted(seen)]
