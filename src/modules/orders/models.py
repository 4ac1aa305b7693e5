"""Order and OrderStatusHistory models.

Business rules implemented:
- Quantity is fixed at creation and always at least 1 (DB check constraint).
- Status only changes through the state machine (enforced at service layer).
- ``version`` is bumped by every status change; updates compare-and-swap on
  it so two concurrent transitions can never both apply.
- Each status change generates an append-only history record.
- The stock effect of an order is never stored: it is derived from the
  status pair of each transition.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import OrderStatus
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root: one product, one branch, one purchaser."""

    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    branch: models.ForeignKey = models.ForeignKey(
        "branches.Branch",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField()
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    version: models.PositiveIntegerField = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(fields=["user", "status"], name="orders_user_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="orders_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    The row written at placement has ``old_status = None``.
    ``changed_by`` is nullable: ``None`` means no acting user was supplied
    (e.g. a system-driven transition) or the user was removed later.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    changed_by: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} : {self.old_status} -> {self.new_status}"
