"""Snapshot assembly: resolve fixture rows into validated collections.

Reference and uniqueness checks happen here, once, so that the query
set can assume every order points at real customers and products.
"""

import logging
from collections.abc import Iterable

from .errors import ReferentialIntegrityViolation
from .models import CatalogSnapshot, Customer, Order, OrderRecord, Product
from .ports import CatalogStorePort

logger = logging.getLogger(__name__)


def _index_by_id(rows, kind: str) -> dict:
    index = {}
    for row in rows:
        if row.id in index:
            raise ReferentialIntegrityViolation(f"Duplicate {kind} id {row.id}")
        index[row.id] = row
    return index


def build_snapshot(
    customers: Iterable[Customer],
    products: Iterable[Product],
    order_records: Iterable[OrderRecord],
) -> CatalogSnapshot:
    """Resolve order references and freeze the three collections.

    Source order of every collection is preserved.

    Raises:
        ReferentialIntegrityViolation: If an id repeats within a collection,
            or an order references a missing customer or product.
        ValueError: If a resolved order violates a model invariant.
    """
    customers = tuple(customers)
    products = tuple(products)
    records = tuple(order_records)

    customers_by_id: dict[int, Customer] = _index_by_id(customers, "customer")
    products_by_id: dict[int, Product] = _index_by_id(products, "product")
    _index_by_id(records, "order")

    orders: list[Order] = []
    for record in records:
        customer = customers_by_id.get(record.customer_id)
        if customer is None:
            raise ReferentialIntegrityViolation(
                f"Order {record.id} references missing customer {record.customer_id}"
            )

        missing = [pid for pid in record.product_ids if pid not in products_by_id]
        if missing:
            raise ReferentialIntegrityViolation(
                f"Order {record.id} references missing products {missing}"
            )

        orders.append(
            Order(
                id=record.id,
                order_date=record.order_date,
                customer=customer,
                products=tuple(products_by_id[pid] for pid in record.product_ids),
            )
        )

    return CatalogSnapshot(
        customers=customers,
        products=products,
        orders=tuple(orders),
    )


async def load_snapshot(store: CatalogStorePort) -> CatalogSnapshot:
    """Read all fixture rows from a store and build a snapshot."""
    customers = await store.get_customers()
    products = await store.get_products()
    records = await store.get_order_records()

    snapshot = build_snapshot(customers, products, records)
    logger.info(
        f"Loaded catalog snapshot: {len(snapshot.customers)} customers, "
        f"{len(snapshot.products)} products, {len(snapshot.orders)} orders"
    )
    return snapshot
