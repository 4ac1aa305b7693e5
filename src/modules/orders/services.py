"""Order service layer (Use Cases).

Orchestrates order placement, status management and listing.  Every
write use case is one atomic unit of work: the stock reservation or
release, the order row, its history record and its outbox events commit
or roll back together.

Business rules enforced:
- Stock is reserved at placement through the Inventory Ledger, which
  holds a row lock on the product until commit.
- Status changes follow the state machine; releasing transitions return
  the order quantity to stock exactly once.
- Status updates compare-and-swap on ``Order.version``.
- Owners may only cancel or receive their own orders.

``storage_guard`` sits outside ``transaction.atomic`` so storage failures
raised at commit time are reported as ``OrderProcessingError`` too.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Type, TypeVar, Union

import structlog
from django.db import transaction
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from modules.branches.exceptions import BranchNotFound
from modules.core.exceptions import storage_guard
from modules.core.pagination import PageRequest
from modules.orders.constants import OrderStatus, StockEffect
from modules.orders.dtos import (
    OrderListFilterDTO,
    OrderOutputDTO,
    OrderPageDTO,
    OrderPageQueryDTO,
    PlaceOrderDTO,
    UpdateStatusDTO,
)
from modules.orders.events import (
    OrderCancelled,
    OrderDeleted,
    OrderPlaced,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    ConcurrentOrderUpdate,
    InvalidOrderRequest,
    NotOrderOwner,
    OrderNotFound,
    OrderProcessingError,
)
from modules.orders.state_machine import ensure_transition

if TYPE_CHECKING:
    from modules.accounts.identity import IIdentityResolver
    from modules.accounts.models import User
    from modules.branches.repositories.interfaces import IBranchRepository
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.ledger import InventoryLedger

logger = structlog.get_logger(__name__)

D = TypeVar("D", bound=BaseModel)


class OrderService:
    """Application service for Order use-cases.

    Receives its collaborators via constructor injection (DIP).  The
    acting user is always an explicit argument, resolved once per call.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        branch_repository: IBranchRepository,
        ledger: InventoryLedger,
        identity_resolver: IIdentityResolver,
    ) -> None:
        self._order_repo = order_repository
        self._branch_repo = branch_repository
        self._ledger = ledger
        self._identity = identity_resolver

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @storage_guard(OrderProcessingError, "order.place_failed")
    @transaction.atomic
    def place_order(
        self, actor: Any, branch_id: Any, product_id: Any, quantity: Any
    ) -> OrderOutputDTO:
        """Reserve stock and create a ``PENDING`` order.

        Raises:
            InvalidOrderRequest: missing or non-positive input.
            UnauthenticatedUser / UserNotFound: *actor* cannot be resolved.
            BranchNotFound: no such branch.
            ProductNotFound / InsufficientStock: from the ledger.
        """
        dto = _validate(
            PlaceOrderDTO,
            branch_id=branch_id,
            product_id=product_id,
            quantity=quantity,
        )
        user = self._identity.resolve(actor)
        log = logger.bind(
            user_id=str(user.pk),
            branch_id=str(dto.branch_id),
            product_id=str(dto.product_id),
            quantity=dto.quantity,
        )

        branch = self._branch_repo.get_by_id(str(dto.branch_id))
        if branch is None:
            raise BranchNotFound(f"Branch {dto.branch_id} not found.")

        remaining = self._ledger.reserve(dto.product_id, dto.quantity)

        order = self._order_repo.create(
            {
                "product_id": dto.product_id,
                "user_id": user.pk,
                "branch_id": branch.id,
                "quantity": dto.quantity,
            }
        )
        self._order_repo.add_history(
            order_id=order.id,
            new_status=OrderStatus.PENDING,
            changed_by=user,
            notes="Order placed",
        )
        order.add_domain_event(
            OrderPlaced(
                aggregate_id=order.id,
                product_id=str(dto.product_id),
                branch_id=str(branch.id),
                user_id=str(user.pk),
                quantity=dto.quantity,
            )
        )
        self._order_repo.store_events(order)

        log.info("order.placed", order_id=str(order.id), remaining_stock=remaining)
        return self._view(order.id)

    @storage_guard(OrderProcessingError, "order.status_update_failed")
    @transaction.atomic
    def update_order_status(
        self,
        order_id: Any,
        target_status: Any,
        actor: Any = None,
        notes: str = "",
    ) -> OrderOutputDTO:
        """Administrative status change.

        *actor* is optional; when given it is resolved and recorded in the
        history row.

        Raises:
            InvalidOrderRequest: unknown target status.
            OrderNotFound, InvalidStatusTransition, ConcurrentOrderUpdate.
        """
        dto = _validate(UpdateStatusDTO, status=target_status, notes=notes or "")
        changed_by = self._identity.resolve(actor) if actor is not None else None
        order = self._load(order_id)
        return self._transition(order, dto.status, changed_by, dto.notes)

    @storage_guard(OrderProcessingError, "order.cancel_failed")
    @transaction.atomic
    def cancel_own_order(self, actor: Any, order_id: Any) -> OrderOutputDTO:
        """Owner cancellation; releases the reserved stock.

        Raises:
            NotOrderOwner: the acting user did not place the order.
        """
        user = self._identity.resolve(actor)
        order = self._load_owned(order_id, user)
        return self._transition(order, OrderStatus.CANCELLED, user, "Cancelled by owner")

    @storage_guard(OrderProcessingError, "order.receive_failed")
    @transaction.atomic
    def receive_own_order(self, actor: Any, order_id: Any) -> OrderOutputDTO:
        """Owner confirms delivery of a shipped order."""
        user = self._identity.resolve(actor)
        order = self._load_owned(order_id, user)
        return self._transition(order, OrderStatus.DELIVERED, user, "Received by owner")

    @storage_guard(OrderProcessingError, "order.delete_failed")
    @transaction.atomic
    def delete_order(self, order_id: Any) -> None:
        """Administrative hard delete.

        Bypasses the state machine and performs no stock reconciliation:
        a deleted ``PENDING`` or ``APPROVED`` order keeps its units out of
        stock.
        """
        order = self._load(order_id)
        logger.warning(
            "order.hard_delete",
            order_id=str(order.id),
            status=order.status,
            quantity=order.quantity,
        )
        order.add_domain_event(
            OrderDeleted(
                aggregate_id=order.id, status=order.status, quantity=order.quantity
            )
        )
        self._order_repo.store_events(order)
        self._order_repo.delete(str(order.id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: Any, actor: Any = None) -> OrderOutputDTO:
        """Retrieve one order.

        When *actor* is given, non-admin users may only read their own
        orders (``NotOrderOwner`` otherwise).
        """
        order = self._load(order_id)
        if actor is not None:
            user = self._identity.resolve(actor)
            if not user.is_admin and order.user_id != user.pk:
                raise NotOrderOwner(f"Order {order.id} belongs to another user.")
        return OrderOutputDTO.from_entity(order)

    def list_orders(
        self,
        filters: Optional[Union[OrderListFilterDTO, Dict[str, Any]]] = None,
        page: int = 0,
        size: Optional[int] = None,
        sort_by: str = "created_at",
        direction: str = "desc",
    ) -> OrderPageDTO:
        """Paged listing over all orders.

        ``filters`` keys: ``status``, ``user_id``, ``branch_id``,
        ``product_id``.  ``size`` defaults to ``ORDERS_DEFAULT_PAGE_SIZE``
        and is clamped to ``1..ORDERS_MAX_PAGE_SIZE``.
        """
        if not isinstance(filters, OrderListFilterDTO):
            filters = _validate(OrderListFilterDTO, **(filters or {}))
        query = _validate(
            OrderPageQueryDTO,
            page=page,
            size=size,
            sort_by=sort_by,
            direction=direction,
        )
        result = self._order_repo.page(
            _filterset_data(filters),
            PageRequest(page=query.page, size=query.size),
            query.ordering,
        )
        return OrderPageDTO.from_page(result)

    def list_my_orders(
        self,
        actor: Any,
        status: Optional[str] = None,
        page: int = 0,
        size: Optional[int] = None,
        sort_by: str = "created_at",
        direction: str = "desc",
    ) -> OrderPageDTO:
        user = self._identity.resolve(actor)
        filters = _validate(OrderListFilterDTO, status=status, user_id=user.pk)
        return self.list_orders(filters, page, size, sort_by, direction)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load(self, order_id: Any) -> Order:
        order = self._order_repo.get_by_id(str(order_id)) if order_id else None
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _load_owned(self, order_id: Any, user: User) -> Order:
        order = self._load(order_id)
        if order.user_id != user.pk:
            logger.warning(
                "order.not_owner", order_id=str(order.id), user_id=str(user.pk)
            )
            raise NotOrderOwner(f"Order {order.id} belongs to another user.")
        return order

    def _view(self, order_id: Any) -> OrderOutputDTO:
        return OrderOutputDTO.from_entity(self._load(order_id))

    def _transition(
        self,
        order: Order,
        target: str,
        changed_by: Optional[User],
        notes: str,
    ) -> OrderOutputDTO:
        """Apply one state-machine step.  Caller owns the transaction."""
        log = logger.bind(
            order_id=str(order.id), current_status=order.status, new_status=target
        )
        decision = ensure_transition(order.status, target)
        if decision.is_noop:
            log.info("order.status_unchanged")
            return OrderOutputDTO.from_entity(order)

        if decision.stock_effect is StockEffect.RELEASE:
            self._ledger.release(order.product_id, order.quantity)

        if not self._order_repo.compare_and_set_status(order.id, order.version, target):
            if self._order_repo.get_by_id(str(order.id)) is None:
                log.warning("order.deleted_during_update")
                raise OrderNotFound(f"Order {order.id} not found.")
            raise ConcurrentOrderUpdate(
                f"Order {order.id} was modified concurrently; retry the request."
            )

        old_status = order.status
        order.status = target
        order.version += 1
        self._order_repo.add_history(
            order_id=order.id,
            new_status=target,
            old_status=old_status,
            changed_by=changed_by,
            notes=notes,
        )
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id, old_status=old_status, new_status=target
            )
        )
        if target == OrderStatus.CANCELLED:
            order.add_domain_event(
                OrderCancelled(aggregate_id=order.id, released_quantity=order.quantity)
            )
        self._order_repo.store_events(order)

        log.info(
            "order.status_updated",
            version=order.version,
            stock_released=decision.stock_effect is StockEffect.RELEASE,
        )
        return self._view(order.id)


def _validate(dto_cls: Type[D], **data: Any) -> D:
    try:
        return dto_cls(**data)
    except PydanticValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'input'}: {error['msg']}"
            for error in exc.errors()
        )
        raise InvalidOrderRequest(details) from exc


def _filterset_data(filters: OrderListFilterDTO) -> Dict[str, str]:
    """Map DTO fields onto ``OrderFilter`` parameter names."""
    mapping = {
        "status": filters.status,
        "user": filters.user_id,
        "branch": filters.branch_id,
        "product": filters.product_id,
    }
    return {key: str(value) for key, value in mapping.items() if value is not None}
