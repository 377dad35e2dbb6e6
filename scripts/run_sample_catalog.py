#!/usr/bin/env python3
"""Sample catalog harness for end-to-end validation.

Registers the demand profiles from a sample file, publishes its listings
through the catalog service, and prints the notifications that were queued.
Nothing is sent; the printed links are what staff would open.

Usage:
    # Run with the bundled sample data
    python scripts/run_sample_catalog.py

    # Custom data and database path
    python scripts/run_sample_catalog.py --data docs/sample_catalog.yaml --database /tmp/sample.db
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import yaml
from dotenv import load_dotenv

from propmatch.config.exceptions import ConfigurationError
from propmatch.config.loader import load_config
from propmatch.domain.models import DemandProfile, ListingDraft
from propmatch.logging.config import configure_logging
from propmatch.persistence.database import close_database, init_database
from propmatch.persistence.exceptions import PersistenceError
from propmatch.pipeline import CatalogService


def print_header(title: str):
    """Print a formatted section header."""
    width = 80
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width + "\n")


def print_summary_table(rows):
    """Print (label, value) rows as a two-column table."""
    max_label_width = max(len(label) for label, _ in rows)

    print("┌" + "─" * (max_label_width + 2) + "┬" + "─" * 22 + "┐")
    print(f"│ {'Metric':<{max_label_width}} │ {'Value':<20} │")
    print("├" + "─" * (max_label_width + 2) + "┼" + "─" * 22 + "┤")

    for label, value in rows:
        print(f"│ {label:<{max_label_width}} │ {str(value):<20} │")

    print("└" + "─" * (max_label_width + 2) + "┴" + "─" * 22 + "┘")


def main():
    """Main entry point for the sample catalog harness."""
    parser = argparse.ArgumentParser(
        description="Publish sample listings and show the queued notifications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: built-in lookup)",
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=Path("docs/sample_catalog.yaml"),
        help="Sample profiles and listings (default: docs/sample_catalog.yaml)",
    )
    parser.add_argument(
        "--database",
        type=Path,
        default=Path("data/sample_catalog.db"),
        help="Path to SQLite database (default: data/sample_catalog.db)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: WARNING)",
    )

    args = parser.parse_args()

    load_dotenv()

    print_header("propmatch - Sample Catalog Harness")
    print(f"Sample data: {args.data}")
    print(f"Database: {args.database}")

    if not args.data.exists():
        print(f"\n❌ Error: Sample data file not found: {args.data}")
        return 1

    try:
        app_config, _ = load_config(args.config)
        configure_logging(
            level=args.log_level,
            format_type=app_config.logging.format,
            environment="validation",
        )

        with open(args.data, "r", encoding="utf-8") as f:
            sample = yaml.safe_load(f) or {}

        init_database(f"sqlite:///{args.database.absolute()}")
        service = CatalogService(app_config=app_config)

        print("\n👥 Registering demand profiles...")
        for raw_profile in sample.get("profiles", []):
            profile = service.register_profile(DemandProfile.model_validate(raw_profile))
            print(f"✓ {profile.name} ({profile.operation_type.value})")

        print("\n🏠 Publishing listings...")
        matched = created = duplicates = failures = 0
        for raw_listing in sample.get("listings", []):
            result = service.create_listing(
                ListingDraft.model_validate(raw_listing), created_by="sample-harness"
            )
            emission = result.emission
            matched += emission.matched_count
            created += emission.created_count
            duplicates += emission.duplicate_count
            failures += int(emission.failed)
            print(f"✓ {result.listing.title}: {emission.matched_count} matching profiles")

        print_header("Match Summary")
        print_summary_table([
            ("Listings Published", len(sample.get("listings", []))),
            ("Profiles Matched", matched),
            ("Notifications Queued", created),
            ("Duplicates Skipped", duplicates),
            ("Failed Match Passes", failures),
            ("Pending In Store", service.count_pending()),
        ])

        print_header("Pending Notifications")
        for record in service.pending_notifications():
            print(f"{record.profile_name} <- {record.listing_title}")
            print(f"  {record.outbound_url}\n")

        print("-" * 80)
        print(f"To clean up: rm {args.database.absolute()}")
        print("-" * 80 + "\n")

        close_database()
        return 1 if failures else 0

    except (ConfigurationError, PersistenceError, ValueError) as e:
        print(f"\n❌ Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
