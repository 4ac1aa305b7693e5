"""Product repository interface.

Extends ``IReadRepository[Product]`` with the locked read required by the
Inventory Ledger.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IReadRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IReadRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional["Product"]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        The lock lives until the caller's enclosing transaction ends.
        Returns ``None`` if the product does not exist.
        """

    @abstractmethod
    def update_stock(self, product: "Product") -> "Product":
        """Persist only ``stock_quantity`` of a locked product."""
