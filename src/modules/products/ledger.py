"""Inventory Ledger.

The only code path through which order flows change ``stock_quantity``.
Both operations take a row lock on the product (``SELECT ... FOR UPDATE``)
and keep it until the enclosing transaction ends, so check-and-decrement
never races with another reservation on the same product.  Reservations
on different products lock different rows and never wait on each other.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

from modules.products.exceptions import (
    InsufficientStock,
    InvalidStockQuantity,
    ProductNotFound,
)

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class InventoryLedger:
    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def reserve(self, product_id, quantity: int) -> int:
        """Take *quantity* units out of on-hand stock.

        Returns the new stock quantity.

        Raises:
            InvalidStockQuantity: *quantity* is below one.
            ProductNotFound: no such product.
            InsufficientStock: fewer than *quantity* units on hand.
        """
        self._check_quantity(quantity)
        product = self._lock(product_id)
        log = logger.bind(product_id=str(product.id), quantity=quantity)

        if not product.has_sufficient_stock(quantity):
            log.warning("inventory.insufficient_stock", available=product.stock_quantity)
            raise InsufficientStock(product.id, quantity, product.stock_quantity)

        product.stock_quantity -= quantity
        self._repo.update_stock(product)
        log.info("inventory.reserved", stock_quantity=product.stock_quantity)
        return product.stock_quantity

    @transaction.atomic
    def release(self, product_id, quantity: int) -> int:
        """Return *quantity* units to on-hand stock.

        The ledger does not track which reservation is being released;
        callers invoke it exactly once per releasing transition.
        """
        self._check_quantity(quantity)
        product = self._lock(product_id)

        product.stock_quantity += quantity
        self._repo.update_stock(product)
        logger.info(
            "inventory.released",
            product_id=str(product.id),
            quantity=quantity,
            stock_quantity=product.stock_quantity,
        )
        return product.stock_quantity

    def _lock(self, product_id) -> Product:
        product = self._repo.get_for_update(product_id)
        if product is None:
            raise ProductNotFound(f"Product {product_id} not found.")
        return product

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidStockQuantity(f"Quantity must be a positive integer, got {quantity!r}.")
