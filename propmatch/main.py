"""Command-line entry point for propmatch."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml
from pydantic import ValidationError

from propmatch.config.environment import EnvironmentConfig
from propmatch.config.exceptions import ConfigurationError
from propmatch.config.loader import load_config, validate_config_file, DEFAULT_CONFIG_LOCATIONS
from propmatch.config.models import AppConfig
from propmatch.domain.models import DemandProfile, Listing, ListingDraft, NotificationRecord
from propmatch.logging import get_logger
from propmatch.logging.config import configure_logging
from propmatch.notifications.payloads import format_price
from propmatch.persistence.database import close_database, init_database
from propmatch.persistence.exceptions import PersistenceError
from propmatch.pipeline import CatalogService
from propmatch.utils.numbers import format_figure

logger = get_logger(__name__, component="cli")

# CLI option -> search parameter name
SEARCH_OPTIONS = {
    "query": "query",
    "location": "location",
    "operation": "operation_type",
    "property_type": "property_type",
    "status": "status",
    "min_price": "price_min",
    "max_price": "price_max",
    "min_bedrooms": "bedrooms_min",
    "max_bedrooms": "bedrooms_max",
    "min_bathrooms": "bathrooms_min",
    "max_bathrooms": "bathrooms_max",
    "min_area": "area_min",
    "max_area": "area_max",
    "feature": "features",
    "sort": "sort_key",
}


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="propmatch",
        description="Real-estate catalog: listing search and demand matching",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Filter and sort listings")
    search.add_argument("-q", "--query", help="Text in title, description or location")
    search.add_argument("--location", help="Text in the listing location")
    search.add_argument("--operation", help="sale, rent or all (venta/arriendo accepted)")
    search.add_argument("--property-type", help="house, apartment, commercial, land or all")
    search.add_argument("--status", help="available, pending, sold or rented")
    search.add_argument("--min-price", help="Minimum price (formatted amounts accepted)")
    search.add_argument("--max-price", help="Maximum price (formatted amounts accepted)")
    search.add_argument("--min-bedrooms")
    search.add_argument("--max-bedrooms")
    search.add_argument("--min-bathrooms")
    search.add_argument("--max-bathrooms")
    search.add_argument("--min-area")
    search.add_argument("--max-area")
    search.add_argument(
        "--feature", action="append", help="Required feature (repeatable)"
    )
    search.add_argument(
        "--sort", help="newest, oldest, price-asc, price-desc, area-asc or area-desc"
    )
    search.add_argument("--json", action="store_true", help="Print results as JSON")

    publish = subparsers.add_parser(
        "publish", help="Publish a listing and queue notifications for matching profiles"
    )
    publish.add_argument("file", type=Path, help="YAML or JSON file describing the listing")
    publish.add_argument("--created-by", help="Staff member publishing the listing")

    register = subparsers.add_parser("register-profile", help="Register a demand profile")
    register.add_argument("file", type=Path, help="YAML or JSON file describing the profile")

    pending = subparsers.add_parser("pending", help="List notifications waiting to be sent")
    pending.add_argument("--json", action="store_true", help="Print notifications as JSON")

    mark_sent = subparsers.add_parser(
        "mark-sent", help="Remove notifications that have been sent"
    )
    mark_sent.add_argument("ids", nargs="+", help="Notification ids")

    validate = subparsers.add_parser("validate-config", help="Validate a configuration file")
    validate.add_argument("path", type=Path, nargs="?", help="File to validate")

    return parser


def search_params(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect the search options that were given on the command line."""
    params = {}
    for option, param in SEARCH_OPTIONS.items():
        value = getattr(args, option, None)
        if value is not None:
            params[param] = value
    return params


def load_document(path: Path) -> Dict[str, Any]:
    """Read a YAML (or JSON) mapping from disk."""
    with open(path, "r", encoding="utf-8") as f:
        document = yaml.safe_load(f)
    if not isinstance(document, dict):
        raise ValueError(f"{path} must contain a mapping of fields")
    return document


def _print_validation_error(title: str, error: ValidationError) -> None:
    print(f"✗ {title}:", file=sys.stderr)
    for item in error.errors():
        field = " -> ".join(str(loc) for loc in item["loc"]) or "(root)"
        print(f"  - {field}: {item['msg']}", file=sys.stderr)


def format_listing_line(listing: Listing, currency: str) -> str:
    rooms = f"{listing.bedrooms}D" if listing.bedrooms is not None else "-"
    baths = f"{listing.bathrooms}B" if listing.bathrooms is not None else "-"
    return (
        f"{listing.id}  {listing.created_at:%Y-%m-%d}  "
        f"{listing.operation_type.value:<4}  {listing.property_type.value:<10}  "
        f"{format_price(listing.price, currency):>16}  {rooms:>3} {baths:>3}  "
        f"{format_figure(listing.area)}m²  {listing.title} ({listing.location})"
    )


def format_notification_line(record: NotificationRecord) -> str:
    return (
        f"{record.id[:12]}  {record.created_at:%Y-%m-%d %H:%M}  "
        f"{record.profile_name} <{record.contact_handle}>  {record.listing_title}\n"
        f"    {record.outbound_url}"
    )


def run_search(service: CatalogService, args: argparse.Namespace) -> int:
    criteria = service.criteria_from_params(search_params(args))
    results = service.search(criteria)

    if args.json:
        print(json.dumps([listing.model_dump(mode="json") for listing in results], ensure_ascii=False, indent=2))
        return 0

    currency = service.app_config.catalog.currency
    for listing in results:
        print(format_listing_line(listing, currency))
    print(f"{len(results)} listings (sorted by {criteria.sort_key.value})")
    return 0


def run_publish(service: CatalogService, args: argparse.Namespace) -> int:
    try:
        draft = ListingDraft.model_validate(load_document(args.file))
    except ValidationError as e:
        _print_validation_error("Invalid listing", e)
        return 2

    result = service.create_listing(draft, created_by=args.created_by)
    emission = result.emission

    print(f"Published listing {result.listing.id}: {result.listing.title}")
    if emission.failed:
        print(f"Warning: notifications were not queued: {emission.error}", file=sys.stderr)
    else:
        print(
            f"{emission.matched_count} matching profiles, "
            f"{emission.created_count} notifications queued"
        )
    return 0


def run_register_profile(service: CatalogService, args: argparse.Namespace) -> int:
    try:
        profile = DemandProfile.model_validate(load_document(args.file))
    except ValidationError as e:
        _print_validation_error("Invalid demand profile", e)
        return 2

    stored = service.register_profile(profile)
    print(f"Registered demand profile {stored.id} for {stored.name}")
    return 0


def run_pending(service: CatalogService, args: argparse.Namespace) -> int:
    records = service.pending_notifications()

    if args.json:
        print(json.dumps([record.model_dump(mode="json") for record in records], ensure_ascii=False, indent=2))
        return 0

    for record in records:
        print(format_notification_line(record))
    print(f"{len(records)} notifications pending")
    return 0


def run_mark_sent(service: CatalogService, args: argparse.Namespace) -> int:
    removed = service.mark_sent(args.ids)
    print(f"Removed {removed} of {len(args.ids)} notifications")
    return 0 if removed == len(set(args.ids)) else 1


COMMANDS = {
    "search": run_search,
    "publish": run_publish,
    "register-profile": run_register_profile,
    "pending": run_pending,
    "mark-sent": run_mark_sent,
}


def _default_config_path() -> Optional[Path]:
    for candidate in DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate
    return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the propmatch CLI.

    Returns:
        Exit code (0 for success, 1 for failures, 2 for invalid input)
    """
    args = build_parser().parse_args(argv)

    if args.command == "validate-config":
        path = args.path or args.config or _default_config_path()
        if path is None:
            print("No configuration file found; built-in defaults are in use")
            return 0
        return 0 if validate_config_file(path) else 1

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        init_database(env_config.database_url)
        service = CatalogService(app_config=app_config)

        try:
            return COMMANDS[args.command](service, args)
        finally:
            close_database()

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except PersistenceError as e:
        print(f"Database error: {e}", file=sys.stderr)
        logger.error(
            f"Command {args.command} failed: {e}",
            extra={"event": "cli.command.failed", "error_type": type(e).__name__},
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
