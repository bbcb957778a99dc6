"""Exceptions raised by the shopquery core."""


class ShopQueryError(Exception):
    """Base class for catalog query and loading failures."""


class EmptyResult(ShopQueryError):
    """An aggregate that divides by the row count matched no rows."""


class ReferentialIntegrityViolation(ShopQueryError):
    """Fixture data references a missing row or repeats an identifier.

    Raised while building a snapshot, never while querying one.
    """
