"""Demand matching: which registered demand profiles suit a new listing.

This module provides:
- MatchingRules: optional checks (bathrooms, area, features)
- MatchResult: per-profile decision with reasons
- ProfileMatch: matched profile paired with its result
- DemandMatcher: evaluates profiles against a listing
- match_demand: functional entry point used by the catalog service
"""

from .engine import DemandMatcher, match_demand
from .models import MatchingRules, MatchResult, ProfileMatch

__all__ = [
    "DemandMatcher",
    "match_demand",
    "MatchingRules",
    "MatchResult",
    "ProfileMatch",
]
