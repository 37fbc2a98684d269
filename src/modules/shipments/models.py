"""Shipment model.

Business rules implemented:
- Tracking number auto-generated on first save (``TMS-YYYY-NNNNNN``),
  unique and never rewritten afterwards.
- ``status`` / ``priority`` / ``type`` restricted to their choices.
- ``created_by`` stamped once from the caller identity.
- ``updated_at`` refreshed on every save (inherited from BaseModel).
- Hard delete: no tombstone, identifiers are UUIDv7 and never reused.
"""

from __future__ import annotations

import secrets
from typing import Any

import structlog
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.shipments.constants import (
    ADDRESS_MAX_LENGTH,
    CARRIER_MAX_LENGTH,
    CUSTOMER_EMAIL_MAX_LENGTH,
    CUSTOMER_NAME_MAX_LENGTH,
    CUSTOMER_PHONE_MAX_LENGTH,
    DIMENSIONS_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    PARTY_MAX_LENGTH,
    TRACKING_NUMBER_MAX_RETRIES,
    TRACKING_NUMBER_PREFIX,
    ShipmentPriority,
    ShipmentStatus,
    ShipmentType,
)

logger = structlog.get_logger(__name__)


class TrackingNumberExhausted(RuntimeError):
    """No free tracking number was found within the retry budget."""


class Shipment(BaseModel):
    """Shipment record.

    Optional columns are nullable rather than blank-defaulted so that a
    ``null`` on the wire maps to ``NULL`` in storage and back unchanged.
    """

    tracking_number: models.CharField = models.CharField(
        max_length=20, unique=True, editable=False
    )
    origin: models.CharField = models.CharField(max_length=ADDRESS_MAX_LENGTH)
    destination: models.CharField = models.CharField(max_length=ADDRESS_MAX_LENGTH)
    status: models.CharField = models.CharField(
        max_length=20,
        choices=ShipmentStatus.choices,
        default=ShipmentStatus.PENDING,
    )
    carrier: models.CharField = models.CharField(max_length=CARRIER_MAX_LENGTH)
    weight: models.FloatField = models.FloatField(null=True, blank=True)
    dimensions: models.CharField = models.CharField(  # noqa: DJ01
        max_length=DIMENSIONS_MAX_LENGTH, null=True, blank=True
    )
    estimated_delivery: models.DateField = models.DateField(null=True, blank=True)
    actual_delivery: models.DateField = models.DateField(null=True, blank=True)
    shipper: models.CharField = models.CharField(  # noqa: DJ01
        max_length=PARTY_MAX_LENGTH, null=True, blank=True
    )
    consignee: models.CharField = models.CharField(  # noqa: DJ01
        max_length=PARTY_MAX_LENGTH, null=True, blank=True
    )
    customer_name: models.CharField = models.CharField(  # noqa: DJ01
        max_length=CUSTOMER_NAME_MAX_LENGTH, null=True, blank=True
    )
    customer_email: models.EmailField = models.EmailField(  # noqa: DJ01
        max_length=CUSTOMER_EMAIL_MAX_LENGTH, null=True, blank=True
    )
    customer_phone: models.CharField = models.CharField(  # noqa: DJ01
        max_length=CUSTOMER_PHONE_MAX_LENGTH, null=True, blank=True
    )
    priority: models.CharField = models.CharField(
        max_length=10,
        choices=ShipmentPriority.choices,
        default=ShipmentPriority.MEDIUM,
    )
    type: models.CharField = models.CharField(
        max_length=10,
        choices=ShipmentType.choices,
        default=ShipmentType.STANDARD,
    )
    cost: models.DecimalField = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )
    notes: models.TextField = models.TextField(  # noqa: DJ01
        max_length=NOTES_MAX_LENGTH, null=True, blank=True
    )
    created_by: models.CharField = models.CharField(  # noqa: DJ01
        max_length=255, null=True, blank=True, editable=False
    )

    class Meta:
        db_table = "shipments"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="shipments_status_idx"),
            models.Index(fields=["priority"], name="shipments_priority_idx"),
            models.Index(fields=["carrier"], name="shipments_carrier_idx"),
            models.Index(fields=["-created_at"], name="shipments_created_idx"),
        ]

    # ------------------------------------------------------------------
    # Tracking number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_tracking_number() -> str:
        """Generate a tracking number: ``TMS-YYYY-NNNNNN`` (random, zero-padded)."""
        year = timezone.now().year
        suffix = secrets.randbelow(1_000_000)
        return f"{TRACKING_NUMBER_PREFIX}-{year}-{suffix:06d}"

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.tracking_number:
            for attempt in range(TRACKING_NUMBER_MAX_RETRIES):
                candidate = self.generate_tracking_number()
                if not Shipment.objects.filter(tracking_number=candidate).exists():
                    self.tracking_number = candidate
                    break
                logger.warning(
                    "shipment.tracking_number_collision",
                    candidate=candidate,
                    attempt=attempt + 1,
                )
            else:
                raise TrackingNumberExhausted(
                    f"Failed to generate unique tracking_number after "
                    f"{TRACKING_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.tracking_number} ({self.status})"
