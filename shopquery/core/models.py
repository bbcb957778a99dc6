"""Domain models for the shopquery catalog.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass, replace
from datetime import date


@dataclass(frozen=True)
class Customer:
    """A customer who places orders."""

    id: int
    name: str
    tier: int  # loyalty tier, 1-3 in the sample fixture
    email: str

    def __post_init__(self) -> None:
        """Validate customer invariants on creation."""
        if self.id <= 0:
            raise ValueError(f"customer id must be positive, got {self.id}")
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        if self.tier < 0:
            raise ValueError(f"tier must be non-negative, got {self.tier}")


@dataclass(frozen=True)
class Product:
    """A product in the catalog.

    Category is free text. Filters compare it case-insensitively, while
    grouping keeps the label exactly as loaded.
    """

    id: int
    name: str
    category: str
    price: float

    def __post_init__(self) -> None:
        """Validate product invariants on creation."""
        if self.id <= 0:
            raise ValueError(f"product id must be positive, got {self.id}")
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        if not self.price >= 0:
            raise ValueError(f"price must be non-negative, got {self.price}")

    def in_category(self, category: str) -> bool:
        """Case-insensitive category match."""
        return self.category.casefold() == category.casefold()

    def with_price(self, price: float) -> "Product":
        """Return a copy of this product with a different price."""
        return replace(self, price=price)


@dataclass(frozen=True)
class Order:
    """An order placed by one customer for one or more products.

    Products behave as a set: a product id listed twice collapses to its
    first occurrence.
    """

    id: int
    order_date: date
    customer: Customer
    products: tuple[Product, ...]  # immutable for frozen dataclass

    def __post_init__(self) -> None:
        """Validate order invariants and collapse duplicate products."""
        if self.id <= 0:
            raise ValueError(f"order id must be positive, got {self.id}")
        if not self.products:
            raise ValueError(f"order {self.id} must reference at least one product")

        seen: set[int] = set()
        distinct: list[Product] = []
        for product in self.products:
            if product.id not in seen:
                seen.add(product.id)
                distinct.append(product)
        if len(distinct) != len(self.products) or not isinstance(self.products, tuple):
            object.__setattr__(self, "products", tuple(distinct))

    @property
    def total_price(self) -> float:
        """Sum of the prices of this order's products."""
        return sum(p.price for p in self.products)

    def has_category(self, category: str) -> bool:
        """True if any product in the order belongs to the category."""
        return any(p.in_category(category) for p in self.products)


@dataclass(frozen=True)
class OrderRecord:
    """An order row as read from a fixture store, before reference resolution."""

    id: int
    order_date: date
    customer_id: int
    product_ids: tuple[int, ...]


@dataclass(frozen=True)
class PriceStatistics:
    """Summary statistics over a set of prices.

    min and max are None when count is zero; sum and average are 0.0.
    """

    count: int
    sum: float
    min: float | None
    max: float | None
    average: float

    @classmethod
    def of(cls, prices: list[float]) -> "PriceStatistics":
        """Compute statistics for a list of prices."""
        if not prices:
            return cls(count=0, sum=0.0, min=None, max=None, average=0.0)
        total = float(sum(prices))
        return cls(
            count=len(prices),
            sum=total,
            min=min(prices),
            max=max(prices),
            average=total / len(prices),
        )


@dataclass(frozen=True)
class CatalogSnapshot:
    """The validated, immutable collections that queries run over."""

    customers: tuple[Customer, ...]
    products: tuple[Product, ...]
    orders: tuple[Order, ...]
