"""Data models for the demand matcher.

This module defines the result of evaluating one demand profile against a
listing and the rule set deciding which checks participate.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from pydantic import BaseModel, Field

from propmatch.domain.models import DemandProfile


class MatchingRules(BaseModel):
    """Which optional checks the matcher applies on top of the mandatory ones.

    Operation type, budget, room count and location are always checked.
    Profiles also carry bathroom, area and feature preferences; these only
    take part in matching when switched on here.
    """

    check_bathrooms: bool = Field(False, description="Apply bathrooms_min/max")
    check_area: bool = Field(False, description="Apply area_min/max")
    check_features: bool = Field(False, description="Require every desired feature")


@dataclass
class MatchResult:
    """Result of evaluating a demand profile against a listing.

    Attributes:
        profile_id: Evaluated profile
        listing_id: Evaluated listing
        is_match: True if every applied check passed
        passed_checks: Names of checks that passed (or were skipped as not applicable)
        failed_checks: Check name -> human-readable reason
    """

    profile_id: str
    listing_id: str
    is_match: bool
    passed_checks: List[str] = field(default_factory=list)
    failed_checks: Dict[str, str] = field(default_factory=dict)

    @property
    def summary(self) -> str:
        """One-line description of the outcome for logs."""
        if self.is_match:
            return f"matched ({', '.join(self.passed_checks)})"
        reasons = "; ".join(f"{name}: {reason}" for name, reason in self.failed_checks.items())
        return f"no match ({reasons})"


@dataclass
class ProfileMatch:
    """A matched profile paired with its evaluation details."""

    profile: DemandProfile
    result: MatchResult
