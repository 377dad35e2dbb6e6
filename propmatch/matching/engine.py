"""Demand matcher deciding which registered profiles a new listing suits.

This module implements the matching logic that:
1. Evaluates one demand profile against a listing, check by check
2. Records why a profile was rejected (for logs and diagnostics)
3. Selects the compatible subset of a profile snapshot, preserving input order

Matching is pure: profiles and listing are never modified, and a profile with
inconsistent bounds (e.g. budget_min > budget_max) is valid input that simply
fails the corresponding check.
"""

import logging
from typing import Dict, Iterable, List, Optional

from propmatch.domain.enums import DemandOperation
from propmatch.domain.models import DemandProfile, Listing
from propmatch.utils.numbers import format_figure, within_bounds
from propmatch.utils.text import any_contains, contains

from .models import MatchingRules, MatchResult, ProfileMatch

logger = logging.getLogger(__name__)


def _format_range(lower: Optional[float], upper: Optional[float]) -> str:
    low = "-inf" if lower is None else format_figure(lower)
    high = "+inf" if upper is None else format_figure(upper)
    return f"[{low}, {high}]"


class DemandMatcher:
    """Evaluates demand profiles against a listing.

    Mandatory checks (all must hold):
    - operation: profile wants both, or the listing's operation type
    - budget: listing price within budget_min/budget_max
    - rooms: listing bedrooms within rooms_min/rooms_max (skipped if the
      listing has no bedroom count)
    - location: listing location contains the profile's preference

    Optional checks are controlled by MatchingRules.
    """

    def __init__(
        self,
        rules: Optional[MatchingRules] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize DemandMatcher.

        Args:
            rules: Optional checks to apply (defaults to mandatory checks only)
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.rules = rules or MatchingRules()
        self.logger = logger_instance or logger

    def evaluate(self, listing: Listing, profile: DemandProfile) -> MatchResult:
        """Evaluate a single profile against a listing.

        Every check is evaluated (no short-circuit) so the result lists all
        reasons a profile was rejected.

        Args:
            listing: Newly created listing
            profile: Demand profile to test

        Returns:
            MatchResult with the decision and per-check details
        """
        passed: List[str] = []
        failed: Dict[str, str] = {}

        # Operation compatibility
        if (
            profile.operation_type == DemandOperation.BOTH
            or profile.operation_type.value == listing.operation_type.value
        ):
            passed.append("operation")
        else:
            failed["operation"] = (
                f"wants {profile.operation_type.value}, listing is {listing.operation_type.value}"
            )

        # Budget
        if within_bounds(listing.price, profile.budget_min, profile.budget_max):
            passed.append("budget")
        else:
            failed["budget"] = (
                f"price {format_figure(listing.price)} outside "
                f"{_format_range(profile.budget_min, profile.budget_max)}"
            )

        # Rooms (listing without bedroom count passes)
        if listing.bedrooms is None or within_bounds(
            listing.bedrooms, profile.rooms_min, profile.rooms_max
        ):
            passed.append("rooms")
        else:
            failed["rooms"] = (
                f"{listing.bedrooms} bedrooms outside "
                f"{_format_range(profile.rooms_min, profile.rooms_max)}"
            )

        # Location
        if profile.location_preference is None or contains(
            listing.location, profile.location_preference
        ):
            passed.append("location")
        else:
            failed["location"] = (
                f"'{listing.location}' does not contain '{profile.location_preference}'"
            )

        if self.rules.check_bathrooms:
            if listing.bathrooms is None or within_bounds(
                listing.bathrooms, profile.bathrooms_min, profile.bathrooms_max
            ):
                passed.append("bathrooms")
            else:
                failed["bathrooms"] = (
                    f"{listing.bathrooms} bathrooms outside "
                    f"{_format_range(profile.bathrooms_min, profile.bathrooms_max)}"
                )

        if self.rules.check_area:
            if within_bounds(listing.area, profile.area_min, profile.area_max):
                passed.append("area")
            else:
                failed["area"] = (
                    f"area {format_figure(listing.area)} outside "
                    f"{_format_range(profile.area_min, profile.area_max)}"
                )

        if self.rules.check_features:
            missing = [
                feature
                for feature in profile.desired_features
                if not any_contains(listing.features, feature)
            ]
            if missing:
                failed["features"] = f"missing {', '.join(missing)}"
            else:
                passed.append("features")

        result = MatchResult(
            profile_id=profile.id,
            listing_id=listing.id,
            is_match=not failed,
            passed_checks=passed,
            failed_checks=failed,
        )

        self.logger.debug(
            f"Profile {profile.id} vs listing {listing.id}: {result.summary}",
            extra={
                "event": "match.profile.evaluated",
                "profile_id": profile.id,
                "is_match": result.is_match,
                "failed_checks": sorted(failed),
            },
        )
        return result

    def evaluate_all(
        self, listing: Listing, profiles: Iterable[DemandProfile]
    ) -> List[ProfileMatch]:
        """Evaluate every profile and keep the matches with their details."""
        matches = []
        for profile in profiles:
            result = self.evaluate(listing, profile)
            if result.is_match:
                matches.append(ProfileMatch(profile=profile, result=result))
        return matches

    def match(self, listing: Listing, profiles: Iterable[DemandProfile]) -> List[DemandProfile]:
        """Return the profiles compatible with the listing, in input order.

        Args:
            listing: Newly created listing
            profiles: Read-only snapshot of registered profiles

        Returns:
            Matching profiles (possibly empty)
        """
        snapshot = list(profiles)
        matched = [item.profile for item in self.evaluate_all(listing, snapshot)]

        self.logger.info(
            f"Listing {listing.id} matched {len(matched)} of {len(snapshot)} demand profiles",
            extra={
                "event": "match.pass.completed",
                "listing_id": listing.id,
                "profiles_total": len(snapshot),
                "profiles_matched": len(matched),
            },
        )
        return matched


def match_demand(
    listing: Listing,
    profiles: Iterable[DemandProfile],
    rules: Optional[MatchingRules] = None,
) -> List[DemandProfile]:
    """Functional entry point: profiles compatible with ``listing``.

    Example:
        >>> match_demand(listing, [profile_a, profile_b])
        [profile_a]
    """
    return DemandMatcher(rules).match(listing, profiles)
