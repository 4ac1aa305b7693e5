"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``PlaceOrderDTO``: input for order placement.
- ``UpdateStatusDTO``: input for a status change.
- ``OrderListFilterDTO`` / ``OrderPageQueryDTO``: listing filters and paging.
- ``OrderOutputDTO``: order view with embedded branch and product summaries.
- ``OrderPageDTO``: one page of order views.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Literal, Optional
from uuid import UUID

from django.conf import settings
from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.branches.dtos import BranchSummaryDTO
from modules.orders.constants import SORTABLE_FIELDS, OrderStatus
from modules.products.dtos import ProductSummaryDTO

if TYPE_CHECKING:
    from modules.core.pagination import Page
    from modules.orders.models import Order


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class PlaceOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    branch_id: UUID
    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class UpdateStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: OrderStatus
    notes: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def normalise_status(cls, v):
        return v.upper() if isinstance(v, str) else v


class OrderListFilterDTO(BaseModel):
    """Optional equality filters; ``None`` means "do not filter"."""

    model_config = ConfigDict(frozen=True)

    status: Optional[OrderStatus] = None
    user_id: Optional[int] = None
    branch_id: Optional[UUID] = None
    product_id: Optional[UUID] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalise_status(cls, v):
        return v.upper() if isinstance(v, str) else v


class OrderPageQueryDTO(BaseModel):
    """Zero-based page request.  ``size`` is clamped, never rejected."""

    model_config = ConfigDict(frozen=True)

    page: int = 0
    size: Optional[int] = Field(default=None, validate_default=True)
    sort_by: str = "created_at"
    direction: Literal["asc", "desc"] = "desc"

    @field_validator("page")
    @classmethod
    def page_must_not_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Page must be zero or greater.")
        return v

    @field_validator("size")
    @classmethod
    def clamp_size(cls, v: Optional[int]) -> int:
        if v is None:
            return settings.ORDERS_DEFAULT_PAGE_SIZE
        return max(1, min(v, settings.ORDERS_MAX_PAGE_SIZE))

    @field_validator("sort_by")
    @classmethod
    def sort_by_must_be_whitelisted(cls, v: str) -> str:
        if v not in SORTABLE_FIELDS:
            raise ValueError(f"Sorting is supported on {', '.join(SORTABLE_FIELDS)}.")
        return v

    @field_validator("direction", mode="before")
    @classmethod
    def normalise_direction(cls, v):
        return v.lower() if isinstance(v, str) else v

    @property
    def ordering(self) -> List[str]:
        prefix = "-" if self.direction == "desc" else ""
        return [f"{prefix}{self.sort_by}", "-id"]


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    product_id: UUID
    branch_id: UUID
    user_id: int
    quantity: int
    status: OrderStatus
    version: int
    created_at: datetime
    updated_at: datetime
    branch: BranchSummaryDTO
    product: ProductSummaryDTO

    @classmethod
    def from_entity(cls, order: Order) -> OrderOutputDTO:
        """Assumes ``branch`` and ``product__category`` are select-related."""
        return cls(
            id=order.id,
            product_id=order.product_id,
            branch_id=order.branch_id,
            user_id=order.user_id,
            quantity=order.quantity,
            status=order.status,
            version=order.version,
            created_at=order.created_at,
            updated_at=order.updated_at,
            branch=BranchSummaryDTO.from_entity(order.branch),
            product=ProductSummaryDTO.from_entity(order.product),
        )


class OrderPageDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: List[OrderOutputDTO]
    current_page: int
    total_items: int
    total_pages: int
    page_size: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_page(cls, page: Page) -> OrderPageDTO:
        return cls(
            content=[OrderOutputDTO.from_entity(order) for order in page.content],
            current_page=page.page,
            total_items=page.total_items,
            total_pages=page.total_pages,
            page_size=page.size,
            has_next=page.has_next,
            has_previous=page.has_previous,
        )
