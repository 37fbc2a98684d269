"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that the
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly, so tests can
hand a fake store to the gateway.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the entity managed by the repository
    (e.g. ``Shipment``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> T:
        """Insert a new entity built from storage-named ``data``."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove an entity by ID; ``False`` when nothing was removed."""
