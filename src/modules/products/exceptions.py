"""Product and inventory exceptions.

Raised by the Inventory Ledger; the order service lets them propagate
unchanged to its callers.
"""

from __future__ import annotations

from modules.core.exceptions import BusinessRuleViolation, InvalidRequest, NotFound


class ProductNotFound(NotFound):
    """The requested product does not exist."""


class InsufficientStock(BusinessRuleViolation):
    """Not enough on-hand stock to reserve the requested quantity.

    Transient: the same reservation may succeed after stock is released.
    """

    def __init__(self, product_id: object, requested: int, available: int) -> None:
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}."
        )


class InvalidStockQuantity(InvalidRequest):
    """A reservation or release was asked for fewer than one unit."""
