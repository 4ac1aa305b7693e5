"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Methods
never open their own unit of work for multi-step operations: the Order
Service wraps each use case in one ``transaction.atomic()`` block.

Status updates are guarded by an optimistic ``version`` check instead of
a row lock, so readers never wait on writers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from modules.core.models import OutboxEvent
from modules.core.pagination import Page, PageRequest, paginate
from modules.orders.constants import OrderStatus
from modules.orders.filters import OrderFilter
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "orders"


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def _queryset(self):
        return Order.objects.select_related("branch", "product__category")

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        order = Order.objects.create(
            product_id=data["product_id"],
            user_id=data["user_id"],
            branch_id=data["branch_id"],
            quantity=data["quantity"],
            status=OrderStatus.PENDING,
        )
        logger.info("order.created", order_id=str(order.id))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Returns ``None`` for non-existent or invalid IDs."""
        try:
            return self._queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def page(
        self,
        filters: Dict[str, Any],
        request: PageRequest,
        ordering: List[str],
    ) -> Page[Order]:
        """Filtering is delegated to ``OrderFilter`` so the admin API and
        the service share one definition of each filter."""
        filterset = OrderFilter(data=filters, queryset=self._queryset())
        queryset = filterset.qs.order_by(*ordering)
        return paginate(queryset, request)

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------

    def compare_and_set_status(
        self, id: UUID, expected_version: int, status: str
    ) -> bool:
        updated = Order.objects.filter(id=id, version=expected_version).update(
            status=status,
            version=F("version") + 1,
            updated_at=timezone.now(),
        )
        if not updated:
            logger.warning(
                "order.version_conflict",
                order_id=str(id),
                expected_version=expected_version,
            )
        return bool(updated)

    def add_history(
        self,
        order_id: UUID,
        new_status: str,
        old_status: Optional[str] = None,
        changed_by: Any = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=new_status,
            changed_by=changed_by,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=new_status,
        )
        return history

    # ------------------------------------------------------------------
    # Outbox
    # ------------------------------------------------------------------

    def store_events(self, entity: Order) -> int:
        events = entity.domain_events
        for event in events:
            OutboxEvent.objects.create(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=event.to_payload(),
                topic=OUTBOX_TOPIC,
            )
        entity.clear_domain_events()
        return len(events)

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order together with its pending domain events."""
        entity.save()
        event_count = self.store_events(entity)
        logger.info("order.saved", order_id=str(entity.id), event_count=event_count)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete an order and its history rows."""
        try:
            deleted, _ = Order.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        if deleted:
            logger.info("order.deleted", order_id=str(id))
        return bool(deleted)
