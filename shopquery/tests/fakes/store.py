"""Fake CatalogStorePort implementation for testing."""

from shopquery.core.models import Customer, OrderRecord, Product
from shopquery.core.ports import CatalogStorePort


class FakeCatalogStorePort(CatalogStorePort):
    """In-memory catalog store for testing.

    Serves the rows it was constructed with and records every call for
    test assertions. Seeding does not parse SQL; it installs the rows
    given as `seed_rows`, if any, and remembers the script.
    """

    def __init__(
        self,
        customers: list[Customer] | None = None,
        products: list[Product] | None = None,
        order_records: list[OrderRecord] | None = None,
        seed_rows: tuple[list[Customer], list[Product], list[OrderRecord]] | None = None,
    ):
        """Initialize with optional preloaded rows."""
        self.customers: list[Customer] = list(customers or [])
        self.products: list[Product] = list(products or [])
        self.order_records: list[OrderRecord] = list(order_records or [])
        self.seed_rows = seed_rows
        self.seeded_scripts: list[str] = []
        self.load_call_count = 0
        self.closed = False

    async def get_customers(self) -> list[Customer]:
        self.load_call_count += 1
        return list(self.customers)

    async def get_products(self) -> list[Product]:
        return list(self.products)

    async def get_order_records(self) -> list[OrderRecord]:
        return list(self.order_records)

    async def is_empty(self) -> bool:
        return not self.customers

    async def seed(self, fixture_sql: str) -> None:
        """Record the script and install the seed rows."""
        self.seeded_scripts.append(fixture_sql)
        if self.seed_rows is not None:
            customers, products, records = self.seed_rows
            self.customers.extend(customers)
            self.products.extend(products)
            self.order_records.extend(records)

    async def close_pool(self) -> None:
        self.closed = True
