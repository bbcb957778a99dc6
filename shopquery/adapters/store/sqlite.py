"""SQLite catalog store adapter.

Implements CatalogStorePort using SQLite with aiosqlite for async access.
Holds the fixture tables in a single file with zero operational overhead.
"""

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Any

import aiosqlite

from shopquery.core.models import Customer, OrderRecord, Product
from shopquery.core.ports import CatalogStorePort

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS customer (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    tier INTEGER NOT NULL,
    email TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS product (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    category TEXT NOT NULL,
    price REAL NOT NULL CHECK (price >= 0)
);

CREATE TABLE IF NOT EXISTS product_order (
    id INTEGER PRIMARY KEY,
    order_date TEXT NOT NULL,
    customer_id INTEGER NOT NULL REFERENCES customer(id)
);

CREATE TABLE IF NOT EXISTS order_product_relationship (
    order_id INTEGER NOT NULL REFERENCES product_order(id),
    product_id INTEGER NOT NULL REFERENCES product(id),
    PRIMARY KEY (order_id, product_id)
);

CREATE INDEX IF NOT EXISTS idx_order_customer ON product_order(customer_id);
CREATE INDEX IF NOT EXISTS idx_order_date ON product_order(order_date);
"""


class SQLiteCatalogStore(CatalogStorePort):
    """SQLite-backed fixture store with connection pooling and async access."""

    def __init__(self, db_path: str, pool_size: int = 5):
        """Initialize SQLite store with connection pooling.

        Args:
            db_path: Path to SQLite database file.
            pool_size: Number of connections to maintain in the pool.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._pool: list[aiosqlite.Connection] = []
        self._pool_lock = asyncio.Lock()
        self._pool_size = pool_size
        self._schema_initialized = False

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get a connection from the pool or create a new one."""
        async with self._pool_lock:
            if self._pool:
                conn = self._pool.pop()
            else:
                conn = await aiosqlite.connect(str(self.db_path))
                await conn.execute("PRAGMA foreign_keys = ON")
        return conn

    async def _return_connection(self, conn: aiosqlite.Connection) -> None:
        """Return a connection to the pool."""
        async with self._pool_lock:
            if len(self._pool) < self._pool_size:
                self._pool.append(conn)
            else:
                await conn.close()

    async def close_pool(self) -> None:
        """Close all pooled connections."""
        async with self._pool_lock:
            for conn in self._pool:
                await conn.close()
            self._pool.clear()

    async def _init_schema(self) -> None:
        """Create the fixture tables on first use.

        Only runs once per instance. Subsequent calls are no-ops.
        """
        if self._schema_initialized:
            return

        conn = await self._get_connection()
        try:
            await conn.executescript(SCHEMA_SQL)
            await conn.commit()
            self._schema_initialized = True
        finally:
            await self._return_connection(conn)

    async def seed(self, fixture_sql: str) -> None:
        """Execute a fixture SQL script inside a single transaction."""
        await self._init_schema()

        conn = await self._get_connection()
        try:
            # executescript() commits first, so wrap the script explicitly
            await conn.executescript(f"BEGIN;\n{fixture_sql}\nCOMMIT;")
            logger.info(f"Seeded fixture data into {self.db_path}")
        except aiosqlite.Error as e:
            await conn.rollback()
            logger.error(f"Failed to seed fixture data: {e}")
            raise
        finally:
            await self._return_connection(conn)

    async def is_empty(self) -> bool:
        """True if no customers have been loaded yet."""
        await self._init_schema()

        conn = await self._get_connection()
        try:
            cursor = await conn.execute("SELECT COUNT(*) FROM customer")
            (count,) = await cursor.fetchone()
            return count == 0
        finally:
            await self._return_connection(conn)

    async def get_customers(self) -> list[Customer]:
        """Return all customers ordered by id."""
        await self._init_schema()

        conn = await self._get_connection()
        try:
            cursor = await conn.execute(
                "SELECT id, name, tier, email FROM customer ORDER BY id"
            )
            rows = await cursor.fetchall()
            return [self._row_to_customer(row) for row in rows]
        finally:
            await self._return_connection(conn)

    async def get_products(self) -> list[Product]:
        """Return all products ordered by id."""
        await self._init_schema()

        conn = await self._get_connection()
        try:
            cursor = await conn.execute(
                "SELECT id, name, category, price FROM product ORDER BY id"
            )
            rows = await cursor.fetchall()
            return [self._row_to_product(row) for row in rows]
        finally:
            await self._return_connection(conn)

    async def get_order_records(self) -> list[OrderRecord]:
        """Return all orders with their product ids, ordered by id."""
        await self._init_schema()

        conn = await self._get_connection()
        try:
            cursor = await conn.execute(
                """
                SELECT order_id, product_id FROM order_product_relationship
                ORDER BY order_id, product_id
                """
            )
            links: dict[int, list[int]] = {}
            for order_id, product_id in await cursor.fetchall():
                links.setdefault(order_id, []).append(product_id)

            cursor = await conn.execute(
                "SELECT id, order_date, customer_id FROM product_order ORDER BY id"
            )
            rows = await cursor.fetchall()
            return [
                self._row_to_order_record(row, links.get(row[0], []))
                for row in rows
            ]
        finally:
            await self._return_connection(conn)

    @staticmethod
    def _row_to_customer(row: tuple[Any, ...]) -> Customer:
        """Convert a customer row to a Customer.

        Raises:
            ValueError: If the row violates a Customer invariant.
        """
        try:
            cust_id, name, tier, email = row
            return Customer(id=cust_id, name=name, tier=tier, email=email or "")
        except (ValueError, TypeError) as e:
            logger.error(f"Failed to parse customer row {row!r}: {e}")
            raise ValueError(f"Customer row parsing failed: {e}") from e

    @staticmethod
    def _row_to_product(row: tuple[Any, ...]) -> Product:
        """Convert a product row to a Product.

        Raises:
            ValueError: If the row violates a Product invariant.
        """
        try:
            prod_id, name, category, price = row
            return Product(id=prod_id, name=name, category=category, price=float(price))
        except (ValueError, TypeError) as e:
            logger.error(f"Failed to parse product row {row!r}: {e}")
            raise ValueError(f"Product row parsing failed: {e}") from e

    @staticmethod
    def _row_to_order_record(row: tuple[Any, ...], product_ids: list[int]) -> OrderRecord:
        """Convert an order row and its linked product ids to an OrderRecord.

        Raises:
            ValueError: If the order date is not an ISO calendar date.
        """
        order_id, order_date, customer_id = row
        try:
            parsed_date = date.fromisoformat(order_date)
        except (ValueError, TypeError) as e:
            logger.error(f"Invalid order_date for order {order_id}: {order_date!r}")
            raise ValueError(f"Invalid date format: {e}") from e

        return OrderRecord(
            id=order_id,
            order_date=parsed_date,
            customer_id=customer_id,
            product_ids=tuple(product_ids),
        )
