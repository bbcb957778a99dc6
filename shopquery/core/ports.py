"""Port interfaces for the shopquery catalog.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - CatalogStorePort: Hydrate customers, products and orders from a
     fixture database

2. **Driving Ports** (adapters call into core)
   - CatalogQueryPort: Read-only queries over a loaded snapshot
"""

from abc import ABC, abstractmethod
from datetime import date

from .models import Customer, Order, OrderRecord, PriceStatistics, Product


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class CatalogStorePort(ABC):
    """Port for reading fixture rows from a relational database.

    Stores return rows in a stable order (ascending id) so that
    source-order tie-breaks in the query set are reproducible.
    """

    @abstractmethod
    async def get_customers(self) -> list[Customer]:
        """Return all customers ordered by id."""

    @abstractmethod
    async def get_products(self) -> list[Product]:
        """Return all products ordered by id."""

    @abstractmethod
    async def get_order_records(self) -> list[OrderRecord]:
        """Return all orders ordered by id, with unresolved references.

        Each record carries the customer id and the product ids linked
        to the order through the join table.
        """

    @abstractmethod
    async def is_empty(self) -> bool:
        """True if the store holds no customers yet."""

    @abstractmethod
    async def seed(self, fixture_sql: str) -> None:
        """Create the schema if needed and execute a fixture SQL script.

        Raises:
            Exception: If the script fails; the store is left unchanged.
        """

    @abstractmethod
    async def close_pool(self) -> None:
        """Release any open connections."""


# ============================================================================
# DRIVING PORTS (Adapters call into core)
# ============================================================================


class CatalogQueryPort(ABC):
    """Port for read-only queries over customers, products and orders.

    Category filters are case-insensitive. Grouping keys keep category
    labels exactly as loaded. Date ranges are closed on both ends.
    """

    @abstractmethod
    def products_in_category(self, category: str) -> list[Product]:
        """All products in the category."""

    @abstractmethod
    def filter_products_by_category_and_min_price(
        self, category: str, min_price_exclusive: float
    ) -> list[Product]:
        """Products in the category priced strictly above the threshold."""

    @abstractmethod
    def orders_containing_category(self, category: str) -> list[Order]:
        """Orders with at least one product in the category."""

    @abstractmethod
    def apply_discount(self, products: list[Product], rate: float) -> list[Product]:
        """New products priced at price * (1 - rate), in input order.

        Raises:
            ValueError: If rate is outside [0, 1].
        """

    @abstractmethod
    def products_ordered_by_tier_in_date_range(
        self, tier: int, start: date, end: date
    ) -> list[Product]:
        """Distinct products ordered by customers of a tier within a date range."""

    @abstractmethod
    def cheapest_in_category(self, category: str) -> Product | None:
        """The lowest priced product in the category, or None."""

    @abstractmethod
    def most_recent_orders(self, n: int) -> list[Order]:
        """At most n orders, newest first."""

    @abstractmethod
    def products_ordered_on_date(self, on: date) -> list[Product]:
        """Distinct products from orders placed on a date."""

    @abstractmethod
    def total_revenue_in_date_range(self, start: date, end: date) -> float:
        """Sum of product prices over all orders in a date range."""

    @abstractmethod
    def average_price_on_date(self, on: date) -> float:
        """Mean product price over all orders placed on a date.

        Raises:
            EmptyResult: If no order was placed on that date.
        """

    @abstractmethod
    def price_statistics_by_category(self, category: str) -> PriceStatistics:
        """Count, sum, min, max and average price of a category."""

    @abstractmethod
    def product_count_by_order(self) -> dict[int, int]:
        """Order id mapped to its number of distinct products."""

    @abstractmethod
    def orders_by_customer(self) -> dict[Customer, list[Order]]:
        """Customer mapped to their orders."""

    @abstractmethod
    def order_total_price(self) -> dict[Order, float]:
        """Order mapped to the sum of its product prices."""

    @abstractmethod
    def product_names_by_category(self) -> dict[str, list[str]]:
        """Category label mapped to the names of its products."""

    @abstractmethod
    def most_expensive_product_per_category(self) -> dict[str, Product]:
        """Category label mapped to its highest priced product."""
