"""Django ORM implementation of the Branch repository."""

from __future__ import annotations

from typing import Optional

from django.core.exceptions import ValidationError

from modules.branches.models import Branch
from modules.branches.repositories.interfaces import IBranchRepository


class BranchDjangoRepository(IBranchRepository):
    def get_by_id(self, id: str) -> Optional[Branch]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return Branch.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None
