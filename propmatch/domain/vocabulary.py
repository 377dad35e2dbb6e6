"""Label vocabulary for the canonical domain enums.

The admin console and the registration forms speak Spanish ("casa",
"arriendo", "ambas") while search criteria use the English enum values
("house", "rent"). Both label sets describe the same concepts, so they are
resolved here onto a single canonical enum at the input boundary. Display
labels for outbound messages go the other way.
"""

from typing import Any, Dict, Optional, Type, TypeVar

from propmatch.utils.text import fold

from .enums import DemandOperation, ListingStatus, OperationType, PropertyType

E = TypeVar("E")

OPERATION_LABELS: Dict[str, OperationType] = {
    "sale": OperationType.SALE,
    "venta": OperationType.SALE,
    "en venta": OperationType.SALE,
    "rent": OperationType.RENT,
    "arriendo": OperationType.RENT,
    "alquiler": OperationType.RENT,
    "en alquiler": OperationType.RENT,
}

DEMAND_OPERATION_LABELS: Dict[str, DemandOperation] = {
    "sale": DemandOperation.SALE,
    "venta": DemandOperation.SALE,
    "rent": DemandOperation.RENT,
    "arriendo": DemandOperation.RENT,
    "alquiler": DemandOperation.RENT,
    "both": DemandOperation.BOTH,
    "ambas": DemandOperation.BOTH,
    "ambos": DemandOperation.BOTH,
}

PROPERTY_TYPE_LABELS: Dict[str, PropertyType] = {
    "house": PropertyType.HOUSE,
    "casa": PropertyType.HOUSE,
    "apartment": PropertyType.APARTMENT,
    "apartamento": PropertyType.APARTMENT,
    "departamento": PropertyType.APARTMENT,
    "depto": PropertyType.APARTMENT,
    "commercial": PropertyType.COMMERCIAL,
    "comercial": PropertyType.COMMERCIAL,
    "local comercial": PropertyType.COMMERCIAL,
    "oficina": PropertyType.COMMERCIAL,
    "land": PropertyType.LAND,
    "terreno": PropertyType.LAND,
    "parcela": PropertyType.LAND,
}

STATUS_LABELS: Dict[str, ListingStatus] = {
    "available": ListingStatus.AVAILABLE,
    "disponible": ListingStatus.AVAILABLE,
    "pending": ListingStatus.PENDING,
    "pendiente": ListingStatus.PENDING,
    "sold": ListingStatus.SOLD,
    "vendida": ListingStatus.SOLD,
    "rented": ListingStatus.RENTED,
    "arrendada": ListingStatus.RENTED,
}

# Display labels used in outbound messages
OPERATION_DISPLAY: Dict[OperationType, str] = {
    OperationType.SALE: "Venta",
    OperationType.RENT: "Arriendo",
}

PROPERTY_TYPE_DISPLAY: Dict[PropertyType, str] = {
    PropertyType.HOUSE: "Casa",
    PropertyType.APARTMENT: "Departamento",
    PropertyType.COMMERCIAL: "Local Comercial",
    PropertyType.LAND: "Terreno",
}


def _resolve(value: Any, enum_cls: Type[E], labels: Dict[str, E]) -> Optional[E]:
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    return labels.get(fold(str(value)))


def resolve_operation_type(value: Any) -> Optional[OperationType]:
    """Resolve an English or Spanish label to an OperationType (None if unknown)."""
    return _resolve(value, OperationType, OPERATION_LABELS)


def resolve_demand_operation(value: Any) -> Optional[DemandOperation]:
    """Resolve an English or Spanish label to a DemandOperation (None if unknown)."""
    return _resolve(value, DemandOperation, DEMAND_OPERATION_LABELS)


def resolve_property_type(value: Any) -> Optional[PropertyType]:
    """Resolve an English or Spanish label to a PropertyType (None if unknown)."""
    return _resolve(value, PropertyType, PROPERTY_TYPE_LABELS)


def resolve_listing_status(value: Any) -> Optional[ListingStatus]:
    """Resolve an English or Spanish label to a ListingStatus (None if unknown)."""
    return _resolve(value, ListingStatus, STATUS_LABELS)


def operation_display(operation: OperationType) -> str:
    return OPERATION_DISPLAY[OperationType(operation)]


def property_type_display(property_type: PropertyType) -> str:
    return PROPERTY_TYPE_DISPLAY[PropertyType(property_type)]
