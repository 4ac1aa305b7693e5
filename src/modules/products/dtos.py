"""Product output DTO embedded in order views."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from modules.products.models import Product


class ProductSummaryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    stock_quantity: int
    category_name: Optional[str]
    is_active: bool

    @classmethod
    def from_entity(cls, product: Product) -> ProductSummaryDTO:
        """Assumes ``category`` is select-related."""
        category = product.category
        return cls(
            id=product.id,
            name=product.name,
            stock_quantity=product.stock_quantity,
            category_name=category.name if category else None,
            is_active=product.is_active,
        )
