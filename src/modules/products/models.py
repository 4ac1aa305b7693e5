"""Category and Product models.

Business rules implemented:
- On-hand stock (``stock_quantity``) can never be negative; enforced by
  ``PositiveIntegerField`` and a database check constraint.
- Order flows never assign ``stock_quantity`` directly: they go through
  ``InventoryLedger.reserve`` / ``release`` under a row lock.
- Inactive products are hidden from catalogue listings.
"""

from __future__ import annotations

import structlog
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Category(BaseModel):
    name = models.CharField(max_length=120, unique=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "categories"
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class Product(BaseModel):
    """Product aggregate root, owner of the on-hand stock quantity."""

    name = models.CharField(max_length=255)
    stock_quantity = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    category = models.ForeignKey(
        "products.Category",
        on_delete=models.PROTECT,
        related_name="products",
    )

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active"], name="products_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock_quantity__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    def has_sufficient_stock(self, quantity: int) -> bool:
        return self.stock_quantity >= quantity

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                name=self.name,
                stock_quantity=self.stock_quantity,
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.stock_quantity})"
