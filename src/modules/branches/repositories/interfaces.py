"""Branch repository interface (read-only from the order core)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IReadRepository

if TYPE_CHECKING:
    from modules.branches.models import Branch


class IBranchRepository(IReadRepository["Branch"]):
    """Repository contract for Branch look-ups."""
