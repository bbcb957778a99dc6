"""Tests for the PostgreSQL catalog store adapter.

NOTE: These tests do not need a PostgreSQL instance. The asyncpg pool is
replaced with mocks so the row translation can be checked in isolation.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from shopquery.adapters.store.postgresql import PostgreSQLCatalogStore


@pytest.fixture
def postgres_config():
    """PostgreSQL connection configuration."""
    return {
        "host": "localhost",
        "port": 5432,
        "database": "shopquery_test",
        "user": "shopquery_test",
        "password": "shopquery_test",
        "pool_size": 3,
    }


@pytest.fixture
def conn() -> AsyncMock:
    """A mocked asyncpg connection."""
    return AsyncMock()


@pytest.fixture
def store(postgres_config, conn: AsyncMock) -> PostgreSQLCatalogStore:
    """Create a store whose pool hands out the mocked connection."""
    adapter = PostgreSQLCatalogStore(**postgres_config)
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    pool.close = AsyncMock()
    adapter._pool = pool
    adapter._schema_initialized = True
    return adapter


class TestPostgreSQLStoreInitialization:
    """Tests for PostgreSQL store initialization."""

    def test_store_initialization(self, postgres_config):
        store = PostgreSQLCatalogStore(**postgres_config)

        assert store.host == postgres_config["host"]
        assert store.port == postgres_config["port"]
        assert store.database == postgres_config["database"]
        assert store.user == postgres_config["user"]
        assert store.password == postgres_config["password"]

    def test_store_default_configuration(self):
        store = PostgreSQLCatalogStore()

        assert store.host == "localhost"
        assert store.port == 5432
        assert store.database == "shopquery"
        assert store.user == "shopquery"

    @pytest.mark.asyncio
    async def test_close_pool(self, store: PostgreSQLCatalogStore):
        pool = store._pool

        await store.close_pool()

        pool.close.assert_awaited_once()
        assert store._pool is None

    @pytest.mark.asyncio
    async def test_close_pool_without_pool(self):
        store = PostgreSQLCatalogStore()
        await store.close_pool()
        assert store._pool is None


class TestPostgreSQLStoreReads:
    """Tests for translating asyncpg records to domain models."""

    @pytest.mark.asyncio
    async def test_get_products_converts_decimal(self, store, conn):
        conn.fetch.return_value = [
            {"id": 1, "name": "Dune", "category": "Books", "price": Decimal("120.50")},
        ]

        products = await store.get_products()

        assert products[0].price == 120.5
        assert isinstance(products[0].price, float)

    @pytest.mark.asyncio
    async def test_get_customers(self, store, conn):
        conn.fetch.return_value = [
            {"id": 1, "name": "Ada", "tier": 2, "email": None},
        ]

        customers = await store.get_customers()

        assert customers[0].tier == 2
        assert customers[0].email == ""

    @pytest.mark.asyncio
    async def test_get_order_records(self, store, conn):
        conn.fetch.return_value = [
            {"id": 1, "order_date": date(2021, 2, 10), "customer_id": 3, "product_ids": [2, 5]},
            {"id": 2, "order_date": date(2021, 2, 11), "customer_id": 1, "product_ids": []},
        ]

        records = await store.get_order_records()

        assert records[0].product_ids == (2, 5)
        assert records[0].order_date == date(2021, 2, 10)
        assert records[1].product_ids == ()

    @pytest.mark.asyncio
    async def test_is_empty(self, store, conn):
        conn.fetchval.return_value = 0
        assert await store.is_empty()

        conn.fetchval.return_value = 4
        assert not await store.is_empty()

    @pytest.mark.asyncio
    async def test_seed_runs_script_in_transaction(self, store, conn):
        transaction = MagicMock()
        transaction.__aenter__ = AsyncMock(return_value=None)
        transaction.__aexit__ = AsyncMock(return_value=False)
        conn.transaction = MagicMock(return_value=transaction)

        await store.seed("INSERT INTO customer VALUES (1, 'Ada', 1, '');")

        conn.transaction.assert_called_once()
        conn.execute.assert_awaited_once_with("INSERT INTO customer VALUES (1, 'Ada', 1, '');")
