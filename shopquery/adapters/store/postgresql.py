"""PostgreSQL catalog store adapter.

Implements CatalogStorePort using PostgreSQL with asyncpg for async access.
Lets the fixture live in a shared database instead of a local file.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Any

import asyncpg

from shopquery.core.models import Customer, OrderRecord, Product
from shopquery.core.ports import CatalogStorePort

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS customer (
        id BIGINT PRIMARY KEY,
        name TEXT NOT NULL,
        tier INTEGER NOT NULL,
        email TEXT NOT NULL DEFAULT ''
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS product (
        id BIGINT PRIMARY KEY,
        name TEXT NOT NULL,
        category TEXT NOT NULL,
        price NUMERIC(12, 2) NOT NULL CHECK (price >= 0)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS product_order (
        id BIGINT PRIMARY KEY,
        order_date DATE NOT NULL,
        customer_id BIGINT NOT NULL REFERENCES customer(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_product_relationship (
        order_id BIGINT NOT NULL REFERENCES product_order(id),
        product_id BIGINT NOT NULL REFERENCES product(id),
        PRIMARY KEY (order_id, product_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_order_customer ON product_order(customer_id)",
    "CREATE INDEX IF NOT EXISTS idx_order_date ON product_order(order_date)",
)


class PostgreSQLCatalogStore(CatalogStorePort):
    """PostgreSQL-backed fixture store with connection pooling and async access."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "shopquery",
        user: str = "shopquery",
        password: str = "",
        pool_size: int = 5,
    ):
        """Initialize PostgreSQL store with connection pooling.

        Args:
            host: PostgreSQL server hostname.
            port: PostgreSQL server port.
            database: Database name.
            user: Database user.
            password: Database password.
            pool_size: Maximum number of pooled connections.
        """
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self._pool: asyncpg.Pool | None = None
        self._pool_size = pool_size
        self._schema_lock = asyncio.Lock()
        self._schema_initialized = False

    async def _init_pool(self) -> None:
        """Initialize the connection pool on first use."""
        if self._pool is not None:
            return

        self._pool = await asyncpg.create_pool(
            host=self.host,
            port=self.port,
            database=self.database,
            user=self.user,
            password=self.password,
            min_size=1,
            max_size=self._pool_size,
        )

    async def close_pool(self) -> None:
        """Close all pooled connections."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def _init_schema(self) -> None:
        """Create the fixture tables on first use."""
        if self._schema_initialized:
            return

        async with self._schema_lock:
            if self._schema_initialized:
                return

            await self._init_pool()
            assert self._pool is not None

            async with self._pool.acquire() as conn:
                for statement in SCHEMA_STATEMENTS:
                    await conn.execute(statement)
                self._schema_initialized = True

    async def seed(self, fixture_sql: str) -> None:
        """Execute a fixture SQL script inside a single transaction."""
        await self._init_schema()
        assert self._pool is not None

        async with self._pool.acquire() as conn:
            try:
                async with conn.transaction():
                    # no bind arguments, so asyncpg accepts multiple statements
                    await conn.execute(fixture_sql)
            except asyncpg.PostgresError as e:
                logger.error(f"Failed to seed fixture data: {e}")
                raise
        logger.info(f"Seeded fixture data into database {self.database}")

    async def is_empty(self) -> bool:
        """True if no customers have been loaded yet."""
        await self._init_schema()
        assert self._pool is not None

        async with self._pool.acquire() as conn:
            count = await conn.fetchval("SELECT COUNT(*) FROM customer")
            return count == 0

    async def get_customers(self) -> list[Customer]:
        """Return all customers ordered by id."""
        await self._init_schema()
        assert self._pool is not None

        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT id, name, tier, email FROM customer ORDER BY id"
            )
            return [self._row_to_customer(row) for row in rows]

    async def get_products(self) -> list[Product]:
        """Return all products ordered by id."""
        await self._init_schema()
        assert self._pool is not None

        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT id, name, category, price FROM product ORDER BY id"
            )
            return [self._row_to_product(row) for row in rows]

    async def get_order_records(self) -> list[OrderRecord]:
        """Return all orders with their product ids, ordered by id."""
        await self._init_schema()
        assert self._pool is not None

        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT o.id, o.order_date, o.customer_id,
                       COALESCE(
                           array_agg(r.product_id ORDER BY r.product_id)
                               FILTER (WHERE r.product_id IS NOT NULL),
                           '{}'
                       ) AS product_ids
                FROM product_order o
                LEFT JOIN order_product_relationship r ON r.order_id = o.id
                GROUP BY o.id, o.order_date, o.customer_id
                ORDER BY o.id
                """
            )
            return [
                OrderRecord(
                    id=row["id"],
                    order_date=row["order_date"],
                    customer_id=row["customer_id"],
                    product_ids=tuple(row["product_ids"]),
                )
                for row in rows
            ]

    @staticmethod
    def _row_to_customer(row: Any) -> Customer:
        """Convert an asyncpg record to a Customer."""
        return Customer(
            id=row["id"],
            name=row["name"],
            tier=row["tier"],
            email=row["email"] or "",
        )

    @staticmethod
    def _row_to_product(row: Any) -> Product:
        """Convert an asyncpg record to a Product.

        NUMERIC columns arrive as Decimal and are converted to float.
        """
        price = row["price"]
        if isinstance(price, Decimal):
            price = float(price)
        return Product(
            id=row["id"],
            name=row["name"],
            category=row["category"],
            price=price,
        )
