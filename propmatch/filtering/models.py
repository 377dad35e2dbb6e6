"""Search criteria for the listing filter pipeline.

FilterCriteria is built straight from user input. Its validators are
deliberately forgiving: a bound that cannot be read as a number, an unknown
enum label or an unknown sort key is dropped (logged at DEBUG) and the
criterion becomes "no constraint". Building criteria never fails for these
inputs.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from propmatch.domain.enums import ListingStatus, OperationType, PropertyType
from propmatch.domain.vocabulary import (
    resolve_listing_status,
    resolve_operation_type,
    resolve_property_type,
)
from propmatch.utils.numbers import parse_amount, parse_bound
from propmatch.utils.text import fold, split_terms

logger = logging.getLogger(__name__)

# Values meaning "any" for enum-valued criteria
_ANY_VALUES = {"", "all", "any", "todos", "todas"}

# Query parameter names used by the search forms
QUERY_PARAM_ALIASES: Dict[str, str] = {
    "q": "query",
    "type": "operation_type",
    "operationType": "operation_type",
    "propertyType": "property_type",
    "minPrice": "price_min",
    "maxPrice": "price_max",
    "minBedrooms": "bedrooms_min",
    "maxBedrooms": "bedrooms_max",
    "minBathrooms": "bathrooms_min",
    "maxBathrooms": "bathrooms_max",
    "minArea": "area_min",
    "maxArea": "area_max",
    "sortBy": "sort_key",
    "sort": "sort_key",
}


class SortKey(str, Enum):
    """Result orderings offered by the search page."""

    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    AREA_ASC = "area-asc"
    AREA_DESC = "area-desc"


SORT_KEY_ALIASES: Dict[str, SortKey] = {
    "date": SortKey.NEWEST,
    "recent": SortKey.NEWEST,
    "price_asc": SortKey.PRICE_ASC,
    "price_desc": SortKey.PRICE_DESC,
    "area_asc": SortKey.AREA_ASC,
    "area_desc": SortKey.AREA_DESC,
}

DEFAULT_SORT_KEY = SortKey.NEWEST


def resolve_sort_key(value: Any) -> SortKey:
    """Resolve a sort key, falling back to the default for unknown values."""
    if isinstance(value, SortKey):
        return value
    if value is None:
        return DEFAULT_SORT_KEY
    label = fold(str(value))
    try:
        return SortKey(label)
    except ValueError:
        pass
    if label in SORT_KEY_ALIASES:
        return SORT_KEY_ALIASES[label]
    logger.debug(f"Unknown sort key {value!r}, using {DEFAULT_SORT_KEY.value}")
    return DEFAULT_SORT_KEY


def _optional_label(value: Any, resolver, field_name: str) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and fold(value) in _ANY_VALUES:
        return None
    resolved = resolver(value)
    if resolved is None:
        logger.debug(
            f"Ignoring unknown {field_name} filter value {value!r}",
            extra={"event": "filter.criteria.ignored", "field": field_name},
        )
    return resolved


def _lenient_bound(value: Any, parser, field_name: str) -> Optional[float]:
    parsed = parser(value)
    if parsed is None and value is not None and not (isinstance(value, str) and not value.strip()):
        logger.debug(
            f"Ignoring unparseable {field_name} bound {value!r}",
            extra={"event": "filter.criteria.ignored", "field": field_name},
        )
    return parsed


class FilterCriteria(BaseModel):
    """One search request. Every criterion defaults to "no constraint"."""

    query: str = Field("", description="Substring of title, description or location")
    location: str = Field("", description="Substring of location")
    operation_type: Optional[OperationType] = Field(None, description="None means all")
    property_type: Optional[PropertyType] = Field(None, description="None means all")
    status: Optional[ListingStatus] = Field(None, description="None means any status")
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    bedrooms_min: Optional[float] = None
    bedrooms_max: Optional[float] = None
    bathrooms_min: Optional[float] = None
    bathrooms_max: Optional[float] = None
    area_min: Optional[float] = None
    area_max: Optional[float] = None
    features: List[str] = Field(default_factory=list, description="All must be present")
    sort_key: SortKey = Field(DEFAULT_SORT_KEY)

    model_config = {"extra": "ignore"}

    @field_validator("query", "location", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("operation_type", mode="before")
    @classmethod
    def lenient_operation(cls, v: Any) -> Any:
        return _optional_label(v, resolve_operation_type, "operation_type")

    @field_validator("property_type", mode="before")
    @classmethod
    def lenient_property_type(cls, v: Any) -> Any:
        return _optional_label(v, resolve_property_type, "property_type")

    @field_validator("status", mode="before")
    @classmethod
    def lenient_status(cls, v: Any) -> Any:
        return _optional_label(v, resolve_listing_status, "status")

    @field_validator("price_min", "price_max", mode="before")
    @classmethod
    def lenient_price(cls, v: Any, info: ValidationInfo) -> Optional[float]:
        return _lenient_bound(v, parse_amount, info.field_name)

    @field_validator(
        "bedrooms_min",
        "bedrooms_max",
        "bathrooms_min",
        "bathrooms_max",
        "area_min",
        "area_max",
        mode="before",
    )
    @classmethod
    def lenient_bound(cls, v: Any, info: ValidationInfo) -> Optional[float]:
        return _lenient_bound(v, parse_bound, info.field_name)

    @field_validator("features", mode="before")
    @classmethod
    def lenient_features(cls, v: Any) -> List[str]:
        if v is not None and not isinstance(v, (str, list, tuple, set)):
            return []
        return split_terms(v)

    @field_validator("sort_key", mode="before")
    @classmethod
    def lenient_sort_key(cls, v: Any) -> SortKey:
        return resolve_sort_key(v)

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "FilterCriteria":
        """Build criteria from query parameters.

        Accepts the field names above as well as the camelCase names used by
        the search forms (``minPrice``, ``sortBy``, ``type``...). Unknown keys
        are ignored.

        Args:
            params: Mapping of raw parameter names to raw values

        Returns:
            FilterCriteria (never raises for malformed values)
        """
        data: Dict[str, Any] = {}
        for key, value in params.items():
            data[QUERY_PARAM_ALIASES.get(key, key)] = value
        return cls.model_validate(data)

    def active_criteria(self) -> List[str]:
        """Names of the criteria that constrain the result."""
        active = []
        for name, value in self.model_dump(exclude={"sort_key"}).items():
            if value in (None, "", []):
                continue
            active.append(name)
        return active

    def is_unconstrained(self) -> bool:
        """True when no criterion excludes anything."""
        return not self.active_criteria()
