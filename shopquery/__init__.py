"""shopquery: functional-style queries over an in-memory shop catalog.

Customers, products and orders are hydrated once from a fixture database
and then queried through a read-only QuerySet.
"""

__version__ = "0.1.0"
