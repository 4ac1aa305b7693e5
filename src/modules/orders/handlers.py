"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCancelled,
    OrderDeleted,
    OrderPlaced,
    OrderStatusChanged,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderPlacedHandler(IEventHandler[OrderPlaced]):
    def handle(self, event: OrderPlaced) -> None:
        logger.info(
            "order.event.placed",
            order_id=str(event.aggregate_id),
            product_id=event.product_id,
            quantity=event.quantity,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.event.cancelled",
            order_id=str(event.aggregate_id),
            released_quantity=event.released_quantity,
        )


class OrderDeletedHandler(IEventHandler[OrderDeleted]):
    def handle(self, event: OrderDeleted) -> None:
        logger.warning(
            "order.event.deleted",
            order_id=str(event.aggregate_id),
            status=event.status,
            quantity=event.quantity,
        )


order_placed_handler = OrderPlacedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_deleted_handler = OrderDeletedHandler()
