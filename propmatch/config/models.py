"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from propmatch.filtering.models import (
    DEFAULT_SORT_KEY,
    SORT_KEY_ALIASES,
    SortKey,
    resolve_sort_key,
)
from propmatch.matching.models import MatchingRules


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def _strip_required(v: str) -> str:
    stripped = v.strip()
    if not stripped:
        raise ValueError("Field cannot be empty or whitespace-only")
    return stripped


class CatalogConfig(BaseModel):
    """Public catalog settings used when composing outbound messages."""

    base_url: str = Field(
        "http://localhost:5173",
        description="Public site URL; listing links are {base_url}/listing/{id}",
    )
    brand_name: str = Field("Axtell Propiedades", description="Signature line of messages")
    tagline: str = Field("Tu inmobiliaria de confianza", description="Line under the brand")
    currency: str = Field("CLP", min_length=3, max_length=3, description="ISO currency code")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop the trailing slash."""
        stripped = _strip_required(v)
        if not stripped.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got: {stripped}")
        return stripped.rstrip("/")

    @field_validator("brand_name")
    @classmethod
    def strip_brand(cls, v: str) -> str:
        """Strip whitespace from the brand name."""
        return _strip_required(v)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.strip().upper()


class MessagingConfig(BaseModel):
    """Outbound messaging channel settings."""

    channel_base_url: str = Field(
        "https://wa.me", description="Base URL of pre-addressed conversation links"
    )

    @field_validator("channel_base_url")
    @classmethod
    def validate_channel_url(cls, v: str) -> str:
        stripped = _strip_required(v)
        if not stripped.startswith(("http://", "https://")):
            raise ValueError(
                f"channel_base_url must start with http:// or https://, got: {stripped}"
            )
        return stripped.rstrip("/")


class SearchConfig(BaseModel):
    """Catalog search defaults."""

    default_sort: SortKey = Field(DEFAULT_SORT_KEY, description="Sort order when none is given")

    @field_validator("default_sort", mode="before")
    @classmethod
    def validate_sort(cls, v):
        """Reject unknown sort keys here instead of silently using the default."""
        if isinstance(v, SortKey):
            return v
        label = str(v).strip().lower()
        if label not in {key.value for key in SortKey} and label not in SORT_KEY_ALIASES:
            choices = ", ".join(key.value for key in SortKey)
            raise ValueError(f"default_sort must be one of {choices}, got: {v}")
        return resolve_sort_key(label)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for propmatch.

    Every section has defaults, so an empty mapping is a valid configuration.
    """

    catalog: CatalogConfig = Field(default_factory=CatalogConfig, description="Catalog settings")
    messaging: MessagingConfig = Field(
        default_factory=MessagingConfig, description="Messaging channel settings"
    )
    matching: MatchingRules = Field(
        default_factory=MatchingRules, description="Optional demand matching checks"
    )
    search: SearchConfig = Field(default_factory=SearchConfig, description="Search defaults")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    def with_base_url(self, base_url: Optional[str]) -> "AppConfig":
        """Return a copy whose catalog base URL is replaced (no-op when None)."""
        if not base_url:
            return self
        catalog = CatalogConfig.model_validate(
            {**self.catalog.model_dump(), "base_url": base_url}
        )
        return self.model_copy(update={"catalog": catalog})
