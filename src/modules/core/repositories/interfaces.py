"""Generic repository interfaces (Dependency Inversion Principle).

``IReadRepository[T]`` covers look-ups for collaborators the core only
reads (branches).  ``IRepository[T]`` adds persistence for aggregates the
core mutates.  Service-layer code depends on these abstractions, never on
the Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class IReadRepository(ABC, Generic[T]):
    """Read-only repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Branch``, ``Product``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key, ``None`` if absent."""


class IRepository(IReadRepository[T]):
    """Base repository contract for aggregates the core writes."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove an entity by ID. Returns ``False`` if it did not exist."""
