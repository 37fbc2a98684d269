"""Django ORM implementation of the Shipment repository.

Satisfies ``IShipmentRepository`` using Django's QuerySet API.
Look-ups follow the Null Object pattern: missing or malformed IDs yield
``None`` / ``False`` and the Service Layer decides what that means.

Updates lock the row with ``select_for_update()`` inside
``transaction.atomic()``; there is no version column, so concurrent
patches to the same shipment are last-write-wins.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.shipments.exceptions import InvalidShipmentFilter
from modules.shipments.filters import ShipmentFilter
from modules.shipments.models import Shipment
from modules.shipments.repositories.interfaces import IShipmentRepository

logger = structlog.get_logger(__name__)


def _describe_errors(errors) -> str:
    return "; ".join(
        f"{field}: {' '.join(str(message) for message in messages)}"
        for field, messages in errors.items()
    )


class ShipmentDjangoRepository(IShipmentRepository):
    """Concrete Shipment repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Shipment]:
        """Retrieve a shipment by primary key.

        Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID).
        """
        try:
            return Shipment.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Shipment]:
        """Retrieve a shipment with a row-level lock.

        Must run inside a transaction.  Returns ``None`` for non-existent
        or invalid IDs.
        """
        try:
            return Shipment.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def search(
        self,
        filters: Dict[str, Any],
        ordering: Sequence[str],
        offset: int,
        limit: int,
    ) -> Tuple[List[Shipment], int]:
        """Filter, order and slice the shipments table.

        Raises ``InvalidShipmentFilter`` when ``ShipmentFilter`` rejects a
        value (an unknown status, a NUL character in ``search``).  A window
        starting past the last match is answered without querying rows.
        """
        filterset = ShipmentFilter(data=filters, queryset=Shipment.objects.all())
        if not filterset.is_valid():
            raise InvalidShipmentFilter(_describe_errors(filterset.errors))

        queryset = filterset.qs.order_by(*ordering)
        total = queryset.count()
        page = list(queryset[offset : offset + limit]) if offset < total else []

        logger.debug(
            "shipment.searched",
            filters=sorted(filters),
            offset=offset,
            limit=limit,
            total=total,
        )
        return page, total

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Shipment:
        """Insert a shipment; the tracking number is generated on save."""
        shipment = Shipment(**data)
        shipment.save()
        logger.info(
            "shipment.inserted",
            shipment_id=str(shipment.id),
            tracking_number=shipment.tracking_number,
        )
        return shipment

    def save(self, entity: Shipment, data: Optional[Dict[str, Any]] = None) -> Shipment:
        """Apply ``data`` (if any) and persist; ``updated_at`` is always refreshed."""
        for field, value in (data or {}).items():
            setattr(entity, field, value)
        entity.save()
        logger.info(
            "shipment.saved",
            shipment_id=str(entity.id),
            fields=sorted(data or {}),
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete a shipment by ID.

        Returns ``True`` if a row was removed, ``False`` if no shipment
        exists with the given ID.
        """
        try:
            deleted, _ = Shipment.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        if deleted:
            logger.info("shipment.deleted", shipment_id=str(id))
        return bool(deleted)
