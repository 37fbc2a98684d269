"""Shipment service layer (Use Cases).

Orchestrates business logic for the Shipment aggregate, delegating
persistence to the injected ``IShipmentRepository``.

Business rules enforced here:
- Listing is filtered, ordered and paged in the store; page metadata is
  derived from the total match count.
- A patch writes only the fields the caller supplied.
- ``actual_delivery`` may only be set while the shipment is delivered.
- Delete of an unknown shipment is an error, not a silent no-op.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction

from modules.shipments.constants import ShipmentStatus
from modules.shipments.dtos import PageInfoDTO, ShipmentConnectionDTO, ShipmentRecord
from modules.shipments.exceptions import InvalidShipmentState, ShipmentNotFound
from modules.shipments.models import Shipment

if TYPE_CHECKING:
    from modules.shipments.dtos import (
        CreateShipmentDTO,
        ListShipmentsDTO,
        UpdateShipmentDTO,
    )
    from modules.shipments.repositories.interfaces import IShipmentRepository

logger = structlog.get_logger(__name__)


class ShipmentService:
    """Application service for Shipment use-cases.

    Receives an ``IShipmentRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IShipmentRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_shipments(self, dto: ListShipmentsDTO) -> ShipmentConnectionDTO:
        """Return one page of shipments matching ``dto.filter``."""
        filters = dto.filter.to_filters()
        rows, total = self._repo.search(
            filters=filters,
            ordering=dto.sort.ordering,
            offset=dto.offset,
            limit=dto.limit,
        )
        logger.info(
            "shipment.listed",
            filters=sorted(filters),
            sort=dto.sort.storage_field,
            page=dto.page,
            limit=dto.limit,
            total=total,
        )
        return ShipmentConnectionDTO(
            edges=[ShipmentRecord.from_entity(row) for row in rows],
            page_info=PageInfoDTO.build(dto.page, dto.limit, total),
        )

    def get_shipment(self, id: str) -> Optional[Shipment]:
        """Retrieve a single shipment, or ``None`` if it does not exist."""
        return self._repo.get_by_id(id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_shipment(
        self, dto: CreateShipmentDTO, created_by: Optional[str]
    ) -> Shipment:
        """Create a shipment; the tracking number is assigned by the model."""
        data = dto.to_storage()
        data["created_by"] = created_by
        shipment = self._repo.create(data)
        logger.info(
            "shipment.created",
            shipment_id=str(shipment.id),
            tracking_number=shipment.tracking_number,
            created_by=created_by,
        )
        return shipment

    @transaction.atomic
    def update_shipment(self, id: str, dto: UpdateShipmentDTO) -> Shipment:
        """Apply a partial update to an existing shipment.

        The row is locked for the whole read-check-write sequence.

        Raises:
            ShipmentNotFound: if the shipment does not exist.
            InvalidShipmentState: if ``actual_delivery`` would be set on a
                shipment that is not delivered.
        """
        shipment = self._repo.get_for_update(id)
        if shipment is None:
            raise ShipmentNotFound(f"Shipment {id} not found.")

        patch = dto.to_patch()
        log = logger.bind(shipment_id=str(id), fields=sorted(patch))

        status = patch.get("status", shipment.status)
        actual_delivery = patch.get("actual_delivery", shipment.actual_delivery)
        if actual_delivery is not None and status != ShipmentStatus.DELIVERED:
            log.warning("shipment.invalid_delivery_date", status=str(status))
            raise InvalidShipmentState(
                "actualDelivery can only be set on a delivered shipment."
            )

        shipment = self._repo.save(shipment, patch)
        log.info("shipment.updated")
        return shipment

    def delete_shipment(self, id: str) -> None:
        """Permanently remove a shipment.

        Raises:
            ShipmentNotFound: if the shipment does not exist.
        """
        if not self._repo.delete(id):
            logger.warning("shipment.delete_missing", shipment_id=str(id))
            raise ShipmentNotFound(f"Shipment {id} not found.")
        logger.info("shipment.removed", shipment_id=str(id))
