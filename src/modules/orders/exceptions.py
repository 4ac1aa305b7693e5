"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.  Each one
derives from a category in ``modules.core.exceptions``, which the API
layer translates into an HTTP response.
"""

from __future__ import annotations

from typing import Iterable

from modules.core.exceptions import (
    AccessDenied,
    ConcurrencyConflict,
    InvalidRequest,
    NotFound,
    ProcessingFailure,
)


class InvalidOrderRequest(InvalidRequest):
    """Missing or malformed order input."""


class OrderNotFound(NotFound):
    """The requested order does not exist."""


class InvalidStatusTransition(InvalidRequest):
    """The requested status change is not a legal transition.

    ``allowed`` holds the statuses reachable from ``current``.
    """

    def __init__(self, current: str, target: str, allowed: Iterable[str]) -> None:
        self.current = current
        self.target = target
        self.allowed = sorted(allowed)
        legal = ", ".join(self.allowed) if self.allowed else "none (terminal status)"
        super().__init__(
            f"Cannot change order status from {current} to {target}. "
            f"Allowed: {legal}."
        )


class NotOrderOwner(AccessDenied):
    """The acting user did not place the order."""


class ConcurrentOrderUpdate(ConcurrencyConflict):
    """The order changed since it was read; retry the whole operation."""


class OrderProcessingError(ProcessingFailure):
    """Storage failure while processing an order."""
