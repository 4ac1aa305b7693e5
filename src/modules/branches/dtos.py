"""Branch output DTO embedded in order views."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from modules.branches.models import Branch


class BranchSummaryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    code: str
    name: str
    address: str
    is_active: bool

    @classmethod
    def from_entity(cls, branch: Branch) -> BranchSummaryDTO:
        return cls(
            id=branch.id,
            code=branch.code,
            name=branch.name,
            address=branch.address,
            is_active=branch.is_active,
        )
