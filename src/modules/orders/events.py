"""Domain events for the Orders bounded context.

Extra fields must stay JSON-safe (str / int) because events are stored in
the outbox and rebuilt with ``event_from_payload``.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    product_id: str = ""
    branch_id: str = ""
    user_id: str = ""
    quantity: int = 0


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised alongside ``OrderStatusChanged`` when an order is cancelled."""

    released_quantity: int = 0


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised by the administrative hard delete."""

    status: str = ""
    quantity: int = 0
