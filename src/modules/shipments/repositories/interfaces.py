"""Shipment repository interface.

Extends ``IRepository[Shipment]`` with the paged listing the gateway
needs and a locking read for read-modify-write patches.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.shipments.models import Shipment


class IShipmentRepository(IRepository["Shipment"]):
    """Repository contract for the Shipment table."""

    @abstractmethod
    def search(
        self,
        filters: Dict[str, Any],
        ordering: Sequence[str],
        offset: int,
        limit: int,
    ) -> Tuple[List[Shipment], int]:
        """Return one page of matching shipments and the total match count.

        ``filters`` keys: ``status``, ``carrier``, ``priority``, ``type``
        (equality) and ``search`` (substring, OR across the search fields).
        ``ordering`` uses storage names (``-created_at``).
        """

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Shipment]:
        """Retrieve a shipment with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def save(
        self, entity: Shipment, data: Optional[Dict[str, Any]] = None
    ) -> Shipment:
        """Apply ``data`` onto ``entity`` and persist it."""
