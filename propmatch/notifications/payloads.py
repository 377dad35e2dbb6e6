"""Context building for the new-listing message template.

Everything here is pure: the same listing, profile and settings always
produce the same context.
"""

from typing import Dict, Optional

from propmatch.config.models import CatalogConfig
from propmatch.domain.models import DemandProfile, Listing
from propmatch.domain.vocabulary import operation_display, property_type_display
from propmatch.utils.numbers import format_figure


def format_price(amount: float, currency: str = "CLP") -> str:
    """Format a price for display.

    Chilean pesos use the local convention (``$`` and dot thousands separator,
    no decimals); other currencies are prefixed with their code.

    Example:
        >>> format_price(150000000)
        '$150.000.000'
        >>> format_price(1250.5, "USD")
        'USD 1,250.50'
    """
    code = (currency or "CLP").upper()
    if code == "CLP":
        return "$" + f"{int(round(amount)):,}".replace(",", ".")
    return f"{code} {amount:,.2f}"


def format_number(value: Optional[float]) -> Optional[str]:
    """Render a count or surface without a trailing ``.0`` or an exponent."""
    if value is None:
        return None
    return format_figure(value)


def build_listing_url(base_url: str, listing_id: str) -> str:
    """Deep link to a listing's detail page: ``{base_url}/listing/{id}``."""
    return f"{base_url.rstrip('/')}/listing/{listing_id}"


def build_message_context(
    listing: Listing, profile: DemandProfile, catalog: Optional[CatalogConfig] = None
) -> Dict:
    """Build the template context for one (listing, profile) pair.

    Args:
        listing: Matched listing
        profile: Recipient demand profile
        catalog: Catalog settings (base URL, brand, currency)

    Returns:
        Dictionary with keys:
        - profile_name: Recipient display name
        - listing_id, listing_title, location, description
        - price: Raw price; price_formatted: display price
        - operation_label, property_type_label: Display labels
        - bedrooms, bathrooms, area: Display figures (None when absent)
        - listing_url: Deep link to the listing
        - brand_name, tagline: Sign-off lines
    """
    catalog = catalog or CatalogConfig()

    return {
        "profile_name": profile.name,
        "listing_id": listing.id,
        "listing_title": listing.title,
        "location": listing.location,
        "description": listing.description,
        "price": listing.price,
        "price_formatted": format_price(listing.price, catalog.currency),
        "operation_label": operation_display(listing.operation_type),
        "property_type_label": property_type_display(listing.property_type),
        "bedrooms": format_number(listing.bedrooms),
        "bathrooms": format_number(listing.bathrooms),
        "area": format_number(listing.area),
        "listing_url": build_listing_url(catalog.base_url, listing.id),
        "brand_name": catalog.brand_name,
        "tagline": catalog.tagline,
    }
