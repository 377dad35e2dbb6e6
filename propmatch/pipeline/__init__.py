"""Catalog orchestration: listing publication, match passes and search."""

from .catalog import CatalogService
from .models import PublishResult

__all__ = [
    "CatalogService",
    "PublishResult",
]
