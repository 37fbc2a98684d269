"""Shipment domain exceptions.

Raised by the Service Layer when business rules are violated.
The gateway catches these and translates them into its error taxonomy.
"""

from __future__ import annotations


class ShipmentNotFound(Exception):
    """The requested shipment does not exist."""


class InvalidShipmentState(Exception):
    """A patch would leave the shipment in an inconsistent state.

    Example: an ``actual_delivery`` date on a shipment that is not delivered.
    """


class InvalidShipmentFilter(Exception):
    """A filter value was rejected by the shipment FilterSet."""
