"""Order domain constants.

Status choices and the transition table of the order state machine.
Each legal ``(from, to)`` pair carries the stock effect applied when the
transition happens.
"""

import enum

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    APPROVED = "APPROVED", "Approved"
    REJECTED = "REJECTED", "Rejected"
    CANCELLED = "CANCELLED", "Cancelled"
    SHIPPED = "SHIPPED", "Shipped"
    DELIVERED = "DELIVERED", "Delivered"


class StockEffect(enum.Enum):
    NONE = "none"
    RELEASE = "release"


TRANSITIONS: dict[str, dict[str, StockEffect]] = {
    OrderStatus.PENDING: {
        OrderStatus.APPROVED: StockEffect.NONE,
        OrderStatus.REJECTED: StockEffect.RELEASE,
        OrderStatus.CANCELLED: StockEffect.RELEASE,
    },
    OrderStatus.APPROVED: {
        OrderStatus.SHIPPED: StockEffect.NONE,
        OrderStatus.CANCELLED: StockEffect.RELEASE,
    },
    OrderStatus.SHIPPED: {
        OrderStatus.DELIVERED: StockEffect.NONE,
    },
    OrderStatus.REJECTED: {},
    OrderStatus.CANCELLED: {},
    OrderStatus.DELIVERED: {},
}

TERMINAL_STATES: frozenset[str] = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)

SORTABLE_FIELDS: tuple[str, ...] = ("created_at", "updated_at", "quantity", "status")
SORT_DIRECTIONS: tuple[str, ...] = ("asc", "desc")
