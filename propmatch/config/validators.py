"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

KNOWN_SECTIONS = {"catalog", "messaging", "matching", "search", "logging"}


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    # Unknown top-level sections are ignored by the schema
    for key in sorted(set(config_dict) - KNOWN_SECTIONS):
        warning_messages.append(f"Unknown configuration section '{key}' will be ignored")

    catalog = config_dict.get("catalog", {})
    if isinstance(catalog, dict):
        base_url = catalog.get("base_url")
        if isinstance(base_url, str):
            if base_url.startswith("http://") and "localhost" not in base_url:
                warning_messages.append(
                    f"catalog.base_url ({base_url}) is not https; links in messages "
                    "will point to an insecure site"
                )
            if "localhost" in base_url or "127.0.0.1" in base_url:
                warning_messages.append(
                    f"catalog.base_url ({base_url}) points to a local address; "
                    "recipients will not be able to open listing links"
                )

    # MatchingRules ignores keys it does not define
    matching = config_dict.get("matching", {})
    if isinstance(matching, dict):
        unknown_rules = sorted(
            key for key in matching
            if key not in ("check_bathrooms", "check_area", "check_features")
        )
        if unknown_rules:
            warning_messages.append(
                f"Unknown matching rules will be ignored: {', '.join(unknown_rules)}"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
