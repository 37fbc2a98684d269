"""Shipment domain constants.

Defines the enumerations a shipment can take, the carrier list offered
to clients, and the field limits enforced at the gateway boundary.
"""

from django.db import models


class ShipmentStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PICKED_UP = "picked_up", "Picked up"
    IN_TRANSIT = "in_transit", "In transit"
    OUT_FOR_DELIVERY = "out_for_delivery", "Out for delivery"
    DELIVERED = "delivered", "Delivered"
    DELAYED = "delayed", "Delayed"
    CANCELLED = "cancelled", "Cancelled"


class ShipmentPriority(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"
    CRITICAL = "critical", "Critical"


class ShipmentType(models.TextChoices):
    STANDARD = "standard", "Standard"
    EXPRESS = "express", "Express"
    OVERNIGHT = "overnight", "Overnight"
    FREIGHT = "freight", "Freight"
    LTL = "ltl", "Less than truckload"


KNOWN_CARRIERS: tuple[str, ...] = ("FedEx", "UPS", "DHL", "USPS", "Maersk", "KLM Cargo")

TRACKING_NUMBER_PREFIX = "TMS"
TRACKING_NUMBER_MAX_RETRIES = 5

# Field limits (characters)
ADDRESS_MAX_LENGTH = 200
CARRIER_MAX_LENGTH = 100
PARTY_MAX_LENGTH = 200
DIMENSIONS_MAX_LENGTH = 50
CUSTOMER_NAME_MAX_LENGTH = 100
CUSTOMER_EMAIL_MAX_LENGTH = 255
CUSTOMER_PHONE_MAX_LENGTH = 20
NOTES_MAX_LENGTH = 500

# Storage columns a listing may be ordered by
SORTABLE_FIELDS: frozenset[str] = frozenset(
    {
        "tracking_number",
        "origin",
        "destination",
        "status",
        "carrier",
        "weight",
        "estimated_delivery",
        "actual_delivery",
        "shipper",
        "consignee",
        "customer_name",
        "priority",
        "type",
        "cost",
        "created_at",
        "updated_at",
    }
)

# Columns matched by the free-text ``search`` filter (OR-combined)
SEARCH_FIELDS: tuple[str, ...] = (
    "tracking_number",
    "origin",
    "destination",
    "shipper",
    "consignee",
)

# Listing page size (records per page)
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
