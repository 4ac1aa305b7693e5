"""Order repository interface.

Extends ``IRepository[Order]`` with the methods the Order aggregate
needs: creation, compare-and-swap status updates, status history,
outbox writes and paged listing.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.core.pagination import Page, PageRequest
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert a ``PENDING`` order.

        ``data`` must include ``product_id``, ``user_id``, ``branch_id`` and
        ``quantity``.
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with branch and product (and category) joined."""

    @abstractmethod
    def compare_and_set_status(
        self, id: UUID, expected_version: int, status: str
    ) -> bool:
        """Set *status* and bump ``version`` only if the row is still at
        *expected_version*.  Returns ``False`` when no row matched."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        new_status: str,
        old_status: Optional[str] = None,
        changed_by: Any = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""

    @abstractmethod
    def store_events(self, entity: Order) -> int:
        """Move the aggregate's pending domain events into the outbox."""

    @abstractmethod
    def page(
        self,
        filters: Dict[str, Any],
        request: PageRequest,
        ordering: List[str],
    ) -> Page[Order]:
        """Return one page of orders matching *filters*."""
