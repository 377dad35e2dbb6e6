"""Configuration management module for propmatch."""

from .environment import DEFAULT_DATABASE_URL, EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import build_app_config, load_config, validate_config_file
from .models import (
    AppConfig,
    CatalogConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    MessagingConfig,
    SearchConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "build_app_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "CatalogConfig",
    "MessagingConfig",
    "SearchConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "DEFAULT_DATABASE_URL",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
