"""The fixed set of operations the gateway serves."""

from __future__ import annotations

from enum import StrEnum


class OperationType(StrEnum):
    QUERY = "query"
    MUTATION = "mutation"


class Operation(StrEnum):
    SHIPMENTS = "shipments"
    SHIPMENT = "shipment"
    ME = "me"
    MY_ROLE = "myRole"
    CREATE_SHIPMENT = "createShipment"
    UPDATE_SHIPMENT = "updateShipment"
    DELETE_SHIPMENT = "deleteShipment"

    @property
    def kind(self) -> OperationType:
        return OperationType.MUTATION if self in MUTATIONS else OperationType.QUERY


MUTATIONS = frozenset(
    {Operation.CREATE_SHIPMENT, Operation.UPDATE_SHIPMENT, Operation.DELETE_SHIPMENT}
)
