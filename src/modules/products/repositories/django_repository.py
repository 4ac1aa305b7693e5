"""Django ORM implementation of the Product repository.

Methods return ``None`` instead of raising for missing rows; the caller
decides how to translate a missing entity.
"""

from __future__ import annotations

from typing import Optional

from django.core.exceptions import ValidationError

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        try:
            return Product.objects.select_related("category").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Product]:
        """``select_for_update`` must run inside a transaction; callers own it.

        ``of=("self",)`` keeps the lock on the product row only, so the
        joined category row is never locked.
        """
        try:
            return (
                Product.objects.select_for_update(of=("self",))
                .select_related("category")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def update_stock(self, product: Product) -> Product:
        product.save(update_fields=["stock_quantity", "updated_at"])
        return product
