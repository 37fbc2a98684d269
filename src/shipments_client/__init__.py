"""Client adapter for the shipment gateway."""

from shipments_client.client import GatewayClient, GatewayRequestError
from shipments_client.hooks import ShipmentsQuery

__all__ = ["GatewayClient", "GatewayRequestError", "ShipmentsQuery"]
