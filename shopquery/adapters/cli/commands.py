"""CLI command implementations for ad hoc catalog queries.

This adapter maps CLI commands to CatalogQueryPort operations. It parses
JSON-friendly arguments (ISO date strings, plain numbers), converts domain
objects into JSON-serialisable dicts, and turns query failures into error
results instead of exceptions.
"""

import logging
from collections.abc import Callable
from dataclasses import asdict
from datetime import date
from typing import Any

from shopquery.core.errors import ShopQueryError
from shopquery.core.models import Customer, Order, PriceStatistics, Product
from shopquery.core.ports import CatalogQueryPort

logger = logging.getLogger(__name__)


def _parse_date(value: Any, name: str) -> date:
    """Accept a date or an ISO 8601 date string."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"{name} must be an ISO date string, got {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"{name} is not a valid ISO date: {value!r}") from e


def _require(args: dict[str, Any], name: str) -> Any:
    if name not in args:
        raise ValueError(f"Missing required parameter: {name}")
    return args[name]


def _require_str(args: dict[str, Any], name: str) -> str:
    value = _require(args, name)
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {value!r}")
    return value


def _as_number(value: Any, name: str, kind: Callable[[Any], Any] = float) -> Any:
    """Coerce a JSON value with int() or float(), reporting bad input as ValueError."""
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


def product_to_dict(product: Product) -> dict[str, Any]:
    return asdict(product)


def customer_to_dict(customer: Customer) -> dict[str, Any]:
    return asdict(customer)


def order_to_dict(order: Order) -> dict[str, Any]:
    """Flatten an order, listing its customer and products by id."""
    return {
        "id": order.id,
        "order_date": order.order_date.isoformat(),
        "customer_id": order.customer.id,
        "product_ids": [p.id for p in order.products],
    }


def statistics_to_dict(stats: PriceStatistics) -> dict[str, Any]:
    return asdict(stats)


class CLICommandHandler:
    """Handles CLI commands by delegating to CatalogQueryPort.

    Every command returns a dict with a "status" of "success" or "error".
    Successful results carry the serialised query output under "result".
    """

    def __init__(self, queries: CatalogQueryPort, recent_orders: int = 3):
        """Initialize the CLI command handler.

        Args:
            queries: CatalogQueryPort implementation to execute commands.
            recent_orders: How many orders the report lists as most recent.
        """
        self.queries = queries
        self.recent_orders = recent_orders
        self._commands: dict[str, Callable[[dict[str, Any]], Any]] = {
            "filter": self._filter_products,
            "orders-with-category": self._orders_with_category,
            "discount": self._discount_category,
            "tier-products": self._tier_products,
            "cheapest": self._cheapest,
            "recent": self._recent,
            "products-on": self._products_on,
            "revenue": self._revenue,
            "average-on": self._average_on,
            "stats": self._stats,
            "product-counts": lambda args: self._product_counts(),
            "orders-by-customer": lambda args: self._orders_by_customer(),
            "order-totals": lambda args: self._order_totals(),
            "names-by-category": lambda args: self.queries.product_names_by_category(),
            "most-expensive": lambda args: self._most_expensive(),
        }

    @property
    def commands(self) -> list[str]:
        """Names of all supported commands."""
        return sorted(self._commands)

    def execute(self, command: str, args: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a named command.

        Args:
            command: Command name, e.g. "cheapest".
            args: JSON-decoded arguments for the command.

        Returns:
            Dictionary with status, operation and either result or message.
        """
        args = args or {}
        handler = self._commands.get(command)
        if handler is None:
            return {
                "status": "error",
                "operation": command,
                "message": f"Unknown command: {command}. Use 'help' for available commands.",
            }

        try:
            result = handler(args)
        except (ValueError, ShopQueryError) as e:
            logger.error(f"Command {command} failed: {e}")
            return {"status": "error", "operation": command, "message": str(e)}

        return {"status": "success", "operation": command, "result": result}

    # ------------------------------------------------------------------
    # Individual commands
    # ------------------------------------------------------------------

    def _filter_products(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        products = self.queries.filter_products_by_category_and_min_price(
            _require_str(args, "category"),
            _as_number(_require(args, "min_price"), "min_price"),
        )
        return [product_to_dict(p) for p in products]

    def _orders_with_category(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        orders = self.queries.orders_containing_category(_require_str(args, "category"))
        return [order_to_dict(o) for o in orders]

    def _discount_category(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        products = self.queries.products_in_category(_require_str(args, "category"))
        rate = _as_number(_require(args, "rate"), "rate")
        discounted = self.queries.apply_discount(products, rate)
        return [product_to_dict(p) for p in discounted]

    def _tier_products(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        products = self.queries.products_ordered_by_tier_in_date_range(
            _as_number(_require(args, "tier"), "tier", int),
            _parse_date(_require(args, "start"), "start"),
            _parse_date(_require(args, "end"), "end"),
        )
        return [product_to_dict(p) for p in products]

    def _cheapest(self, args: dict[str, Any]) -> dict[str, Any] | None:
        product = self.queries.cheapest_in_category(_require_str(args, "category"))
        return product_to_dict(product) if product is not None else None

    def _recent(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        n = _as_number(args.get("n", self.recent_orders), "n", int)
        orders = self.queries.most_recent_orders(n)
        return [order_to_dict(o) for o in orders]

    def _products_on(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        products = self.queries.products_ordered_on_date(
            _parse_date(_require(args, "date"), "date")
        )
        return [product_to_dict(p) for p in products]

    def _revenue(self, args: dict[str, Any]) -> float:
        return self.queries.total_revenue_in_date_range(
            _parse_date(_require(args, "start"), "start"),
            _parse_date(_require(args, "end"), "end"),
        )

    def _average_on(self, args: dict[str, Any]) -> float:
        return self.queries.average_price_on_date(
            _parse_date(_require(args, "date"), "date")
        )

    def _stats(self, args: dict[str, Any]) -> dict[str, Any]:
        return statistics_to_dict(
            self.queries.price_statistics_by_category(_require_str(args, "category"))
        )

    def _product_counts(self) -> dict[str, int]:
        return {str(k): v for k, v in self.queries.product_count_by_order().items()}

    def _orders_by_customer(self) -> list[dict[str, Any]]:
        return [
            {
                "customer": customer_to_dict(customer),
                "order_ids": [o.id for o in orders],
            }
            for customer, orders in self.queries.orders_by_customer().items()
        ]

    def _order_totals(self) -> dict[str, float]:
        return {str(o.id): total for o, total in self.queries.order_total_price().items()}

    def _most_expensive(self) -> dict[str, dict[str, Any]]:
        return {
            category: product_to_dict(product)
            for category, product in self.queries.most_expensive_product_per_category().items()
        }

    # ------------------------------------------------------------------
    # Report
    # ------------------------------------------------------------------

    def run_report(self) -> dict[str, dict[str, Any]]:
        """Run every exercise against the loaded catalog.

        Uses the classic sample parameters: Books above 100, orders with
        Baby products, Toys at 10% off, tier 2 purchases from 1 Feb to
        1 Apr 2021, and so on.

        Returns:
            Mapping of exercise title to its command result.
        """
        exercises: list[tuple[str, str, dict[str, Any]]] = [
            ("Products in Books priced above 100", "filter",
             {"category": "Books", "min_price": 100}),
            ("Orders containing Baby products", "orders-with-category",
             {"category": "Baby"}),
            ("Toys with a 10% discount", "discount",
             {"category": "Toys", "rate": 0.1}),
            ("Products ordered by tier 2 customers, 2021-02-01 to 2021-04-01",
             "tier-products", {"tier": 2, "start": "2021-02-01", "end": "2021-04-01"}),
            ("Cheapest product in Books", "cheapest", {"category": "Books"}),
            (f"{self.recent_orders} most recent orders", "recent",
             {"n": self.recent_orders}),
            ("Products ordered on 2021-03-15", "products-on", {"date": "2021-03-15"}),
            ("Total revenue for February 2021", "revenue",
             {"start": "2021-02-01", "end": "2021-02-28"}),
            ("Average product price on 2021-03-15", "average-on", {"date": "2021-03-15"}),
            ("Price statistics for Books", "stats", {"category": "Books"}),
            ("Product count by order", "product-counts", {}),
            ("Orders by customer", "orders-by-customer", {}),
            ("Total price by order", "order-totals", {}),
            ("Product names by category", "names-by-category", {}),
            ("Most expensive product per category", "most-expensive", {}),
        ]

        report: dict[str, dict[str, Any]] = {}
        for title, command, args in exercises:
            report[title] = self.execute(command, args)
        logger.info(f"Report complete: {len(report)} exercises")
        return report
