"""In-memory query set: implements CatalogQueryPort over a snapshot.

Every query is a pure read. Results are new lists and dicts; the
snapshot tuples and the frozen models inside them are never modified.

Tie-breaks are deterministic: where several products share the extreme
price, the one that appears first in the source collection wins.
"""

from collections.abc import Iterable
from datetime import date

from .errors import EmptyResult
from .models import CatalogSnapshot, Customer, Order, PriceStatistics, Product
from .ports import CatalogQueryPort


def _distinct_by_id(products: Iterable[Product]) -> list[Product]:
    seen: set[int] = set()
    result: list[Product] = []
    for product in products:
        if product.id not in seen:
            seen.add(product.id)
            result.append(product)
    return result


class QuerySet(CatalogQueryPort):
    """Read-only query operations over customers, products and orders."""

    def __init__(self, snapshot: CatalogSnapshot):
        """Initialize the query set.

        Args:
            snapshot: Validated collections, as built by build_snapshot().
        """
        self.snapshot = snapshot

    @property
    def customers(self) -> tuple[Customer, ...]:
        return self.snapshot.customers

    @property
    def products(self) -> tuple[Product, ...]:
        return self.snapshot.products

    @property
    def orders(self) -> tuple[Order, ...]:
        return self.snapshot.orders

    def _orders_between(self, start: date, end: date) -> list[Order]:
        return [o for o in self.orders if start <= o.order_date <= end]

    def _orders_on(self, on: date) -> list[Order]:
        return [o for o in self.orders if o.order_date == on]

    # ------------------------------------------------------------------
    # Filtering and mapping
    # ------------------------------------------------------------------

    def products_in_category(self, category: str) -> list[Product]:
        return [p for p in self.products if p.in_category(category)]

    def filter_products_by_category_and_min_price(
        self, category: str, min_price_exclusive: float
    ) -> list[Product]:
        return [
            p
            for p in self.products_in_category(category)
            if p.price > min_price_exclusive
        ]

    def orders_containing_category(self, category: str) -> list[Order]:
        return [o for o in self.orders if o.has_category(category)]

    def apply_discount(self, products: list[Product], rate: float) -> list[Product]:
        """Return discounted copies of the given products.

        Args:
            products: Products to discount; left untouched.
            rate: Fraction taken off each price, e.g. 0.1 for 10%.

        Returns:
            New Product values in the same order as the input.

        Raises:
            ValueError: If rate is outside [0, 1].
        """
        if not 0 <= rate <= 1:
            raise ValueError(f"discount rate must be between 0 and 1, got {rate}")
        return [p.with_price(p.price * (1 - rate)) for p in products]

    def products_ordered_by_tier_in_date_range(
        self, tier: int, start: date, end: date
    ) -> list[Product]:
        return _distinct_by_id(
            product
            for order in self._orders_between(start, end)
            if order.customer.tier == tier
            for product in order.products
        )

    def products_ordered_on_date(self, on: date) -> list[Product]:
        return _distinct_by_id(
            product for order in self._orders_on(on) for product in order.products
        )

    # ------------------------------------------------------------------
    # Sorting and limiting
    # ------------------------------------------------------------------

    def cheapest_in_category(self, category: str) -> Product | None:
        # min() keeps the first of equal keys
        return min(
            self.products_in_category(category),
            key=lambda p: p.price,
            default=None,
        )

    def most_recent_orders(self, n: int) -> list[Order]:
        """Return at most n orders, newest first.

        The sort is stable: orders sharing a date keep their source order.
        A non-positive n yields an empty list.
        """
        if n <= 0:
            return []
        return sorted(self.orders, key=lambda o: o.order_date, reverse=True)[:n]

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def total_revenue_in_date_range(self, start: date, end: date) -> float:
        # Not deduplicated: a product bought in two orders counts twice.
        return float(
            sum(
                product.price
                for order in self._orders_between(start, end)
                for product in order.products
            )
        )

    def average_price_on_date(self, on: date) -> float:
        prices = [p.price for order in self._orders_on(on) for p in order.products]
        if not prices:
            raise EmptyResult(f"No products were ordered on {on.isoformat()}")
        return sum(prices) / len(prices)

    def price_statistics_by_category(self, category: str) -> PriceStatistics:
        return PriceStatistics.of(
            [p.price for p in self.products_in_category(category)]
        )

    # ------------------------------------------------------------------
    # Grouping
    # ------------------------------------------------------------------

    def product_count_by_order(self) -> dict[int, int]:
        return {o.id: len({p.id for p in o.products}) for o in self.orders}

    def orders_by_customer(self) -> dict[Customer, list[Order]]:
        """Group orders by the customer who placed them.

        Groups are keyed internally on customer id, so two Customer values
        with the same id land in one group. The returned dict uses the first
        Customer value seen for each id, in order of first occurrence.
        """
        owners: dict[int, Customer] = {}
        groups: dict[int, list[Order]] = {}
        for order in self.orders:
            customer_id = order.customer.id
            if customer_id not in groups:
                owners[customer_id] = order.customer
                groups[customer_id] = []
            groups[customer_id].append(order)
        return {owners[cid]: orders for cid, orders in groups.items()}

    def order_total_price(self) -> dict[Order, float]:
        return {o: float(o.total_price) for o in self.orders}

    def product_names_by_category(self) -> dict[str, list[str]]:
        # Keys keep source case: "Books" and "books" are separate groups.
        names: dict[str, list[str]] = {}
        for product in self.products:
            names.setdefault(product.category, []).append(product.name)
        return names

    def most_expensive_product_per_category(self) -> dict[str, Product]:
        best: dict[str, Product] = {}
        for product in self.products:
            current = best.get(product.category)
            # strict comparison keeps the first of equal prices
            if current is None or product.price > current.price:
                best[product.category] = product
        return best
