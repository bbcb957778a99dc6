"""Core domain logic for the shopquery catalog.

This package contains zero external dependencies and represents
the pure query logic of the application. Fixture loading from real
databases is handled by the adapters package.
"""

from .errors import EmptyResult, ReferentialIntegrityViolation, ShopQueryError
from .models import (
    CatalogSnapshot,
    Customer,
    Order,
    OrderRecord,
    PriceStatistics,
    Product,
)
from .query_set import QuerySet
from .snapshot import build_snapshot, load_snapshot

__all__ = [
    "CatalogSnapshot",
    "Customer",
    "EmptyResult",
    "Order",
    "OrderRecord",
    "PriceStatistics",
    "Product",
    "QuerySet",
    "ReferentialIntegrityViolation",
    "ShopQueryError",
    "build_snapshot",
    "load_snapshot",
]
