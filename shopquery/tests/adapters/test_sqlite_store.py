"""Integration tests for the SQLite catalog store adapter."""

from datetime import date
from pathlib import Path

import aiosqlite
import pytest

from shopquery.adapters.store.sqlite import SQLiteCatalogStore
from shopquery.core.query_set import QuerySet
from shopquery.core.snapshot import load_snapshot
from shopquery.fixtures import default_fixture_path

SMALL_FIXTURE = """
INSERT INTO customer (id, name, tier, email) VALUES
    (1, 'Ada', 1, 'ada@example.com'),
    (2, 'Brook', 2, 'brook@example.com');

INSERT INTO product (id, name, category, price) VALUES
    (1, 'Dune', 'Books', 120),
    (2, 'Emma', 'Books', 80),
    (3, 'Robot', 'Toys', 50);

INSERT INTO product_order (id, order_date, customer_id) VALUES
    (1, '2021-02-10', 1),
    (2, '2021-02-20', 2);

INSERT INTO order_product_relationship (order_id, product_id) VALUES
    (1, 3), (1, 1), (1, 2),
    (2, 2);
"""


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path to a fresh database file in a nested directory."""
    return tmp_path / "data" / "shop.db"


@pytest.fixture
async def store(db_path: Path) -> SQLiteCatalogStore:
    """Create a SQLite store on a temporary database."""
    adapter = SQLiteCatalogStore(db_path=str(db_path))
    yield adapter
    await adapter.close_pool()


class TestSchemaAndSeeding:
    """Tests for schema creation and fixture seeding."""

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, store: SQLiteCatalogStore, db_path: Path) -> None:
        assert db_path.parent.is_dir()

    @pytest.mark.asyncio
    async def test_new_store_is_empty(self, store: SQLiteCatalogStore) -> None:
        assert await store.is_empty()
        assert await store.get_customers() == []
        assert await store.get_order_records() == []

    @pytest.mark.asyncio
    async def test_seed_small_fixture(self, store: SQLiteCatalogStore) -> None:
        await store.seed(SMALL_FIXTURE)

        assert not await store.is_empty()
        customers = await store.get_customers()
        assert [c.name for c in customers] == ["Ada", "Brook"]
        assert customers[1].tier == 2

    @pytest.mark.asyncio
    async def test_prices_are_floats(self, store: SQLiteCatalogStore) -> None:
        await store.seed(SMALL_FIXTURE)

        products = await store.get_products()
        assert [p.price for p in products] == [120.0, 80.0, 50.0]
        assert all(isinstance(p.price, float) for p in products)

    @pytest.mark.asyncio
    async def test_order_records_carry_references(self, store: SQLiteCatalogStore) -> None:
        await store.seed(SMALL_FIXTURE)

        records = await store.get_order_records()

        assert [r.id for r in records] == [1, 2]
        assert records[0].order_date == date(2021, 2, 10)
        assert records[0].customer_id == 1
        assert records[0].product_ids == (1, 2, 3)
        assert records[1].product_ids == (2,)

    @pytest.mark.asyncio
    async def test_dangling_reference_rejected_and_rolled_back(
        self, store: SQLiteCatalogStore
    ) -> None:
        """Foreign keys are enforced and a failed seed leaves no rows."""
        bad_fixture = """
        INSERT INTO customer (id, name, tier, email) VALUES (1, 'Ada', 1, '');
        INSERT INTO product_order (id, order_date, customer_id) VALUES (1, '2021-02-10', 99);
        """

        with pytest.raises(aiosqlite.IntegrityError):
            await store.seed(bad_fixture)

        assert await store.is_empty()

    @pytest.mark.asyncio
    async def test_negative_price_rejected(self, store: SQLiteCatalogStore) -> None:
        with pytest.raises(aiosqlite.IntegrityError):
            await store.seed(
                "INSERT INTO product (id, name, category, price) VALUES (1, 'X', 'Toys', -1);"
            )

    @pytest.mark.asyncio
    async def test_data_persists_across_instances(self, db_path: Path) -> None:
        first = SQLiteCatalogStore(db_path=str(db_path))
        await first.seed(SMALL_FIXTURE)
        await first.close_pool()

        second = SQLiteCatalogStore(db_path=str(db_path))
        try:
            assert len(await second.get_products()) == 3
        finally:
            await second.close_pool()


class TestRowParsing:
    """Tests for defensive row conversion."""

    def test_invalid_order_date(self) -> None:
        with pytest.raises(ValueError, match="Invalid date format"):
            SQLiteCatalogStore._row_to_order_record((1, "10/02/2021", 1), [1])

    def test_invalid_product_row(self) -> None:
        with pytest.raises(ValueError, match="Product row parsing failed"):
            SQLiteCatalogStore._row_to_product((1, "Dune", "Books", "free"))

    def test_invalid_customer_row(self) -> None:
        with pytest.raises(ValueError, match="Customer row parsing failed"):
            SQLiteCatalogStore._row_to_customer((0, "Ada", 1, None))

    def test_null_email_becomes_empty(self) -> None:
        customer = SQLiteCatalogStore._row_to_customer((1, "Ada", 1, None))
        assert customer.email == ""


class TestBundledFixture:
    """Tests running the bundled sample catalog end to end."""

    @pytest.fixture
    async def queries(self, store: SQLiteCatalogStore) -> QuerySet:
        await store.seed(default_fixture_path().read_text(encoding="utf-8"))
        return QuerySet(await load_snapshot(store))

    @pytest.mark.asyncio
    async def test_collection_sizes(self, queries: QuerySet) -> None:
        assert len(queries.customers) == 10
        assert len(queries.products) == 25
        assert len(queries.orders) == 30

    @pytest.mark.asyncio
    async def test_every_order_has_products(self, queries: QuerySet) -> None:
        assert all(queries.product_count_by_order()[o.id] >= 1 for o in queries.orders)

    @pytest.mark.asyncio
    async def test_orders_on_march_fifteenth(self, queries: QuerySet) -> None:
        products = queries.products_ordered_on_date(date(2021, 3, 15))
        assert [p.id for p in products] == [6, 15, 10, 21, 22, 7, 23, 4]

    @pytest.mark.asyncio
    async def test_cheapest_book_tie_breaks_on_id(self, queries: QuerySet) -> None:
        """Products 6 and 10 are both Books at 8.31; 6 is loaded first."""
        cheapest = queries.cheapest_in_category("books")
        assert cheapest is not None
        assert cheapest.id == 6
        assert cheapest.price == pytest.approx(8.31)
