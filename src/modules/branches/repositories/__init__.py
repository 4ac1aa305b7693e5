"""Branch repositories package."""

from modules.branches.repositories.django_repository import BranchDjangoRepository
from modules.branches.repositories.interfaces import IBranchRepository

__all__ = ["BranchDjangoRepository", "IBranchRepository"]
