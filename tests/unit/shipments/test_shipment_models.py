from __future__ import annotations

import re
from unittest.mock import patch

import pytest
from django.db import IntegrityError
from django.utils import timezone

from modules.shipments.models import Shipment, TrackingNumberExhausted

pytestmark = pytest.mark.unit

TRACKING_FORMAT = re.compile(r"^TMS-\d{4}-\d{6}$")


class TestTrackingNumber:
    def test_format(self, make_shipment):
        shipment = make_shipment()
        assert TRACKING_FORMAT.match(shipment.tracking_number)
        assert shipment.tracking_number.split("-")[1] == str(timezone.now().year)

    def test_generator_zero_pads(self):
        with patch("modules.shipments.models.secrets.randbelow", return_value=42):
            assert Shipment.generate_tracking_number().endswith("-000042")

    def test_unique_across_many_creates(self, make_shipment):
        numbers = {make_shipment().tracking_number for _ in range(50)}
        assert len(numbers) == 50

    def test_not_rewritten_on_save(self, make_shipment):
        shipment = make_shipment()
        original = shipment.tracking_number
        shipment.status = "in_transit"
        shipment.save()
        shipment.refresh_from_db()
        assert shipment.tracking_number == original

    def test_retries_on_collision(self, make_shipment):
        existing = make_shipment()
        candidates = iter([existing.tracking_number, "TMS-2024-999999"])

        with patch.object(
            Shipment, "generate_tracking_number", side_effect=lambda: next(candidates)
        ):
            shipment = make_shipment()

        assert shipment.tracking_number == "TMS-2024-999999"

    def test_gives_up_after_retry_budget(self, make_shipment):
        existing = make_shipment()

        with patch.object(
            Shipment, "generate_tracking_number", return_value=existing.tracking_number
        ) as generator:
            with pytest.raises(TrackingNumberExhausted):
                make_shipment()

        assert generator.call_count == 5
        assert Shipment.objects.count() == 1

    def test_unique_constraint_is_final_guard(self, make_shipment):
        existing = make_shipment()
        duplicate = Shipment(
            origin="A",
            destination="B",
            carrier="UPS",
            tracking_number=existing.tracking_number,
        )
        with pytest.raises(IntegrityError):
            duplicate.save()


class TestShipmentDefaults:
    def test_defaults(self, make_shipment):
        shipment = make_shipment()
        assert shipment.status == "pending"
        assert shipment.priority == "medium"
        assert shipment.type == "standard"
        assert shipment.created_by is None

    def test_updated_at_advances(self, make_shipment):
        shipment = make_shipment()
        first = shipment.updated_at
        shipment.notes = "Fragile"
        shipment.save(update_fields=["notes"])
        shipment.refresh_from_db()
        assert shipment.updated_at >= first
        assert shipment.created_at <= shipment.updated_at

    def test_ids_are_time_ordered(self, make_shipment):
        first, second = make_shipment(), make_shipment()
        assert first.id != second.id
        assert first.id.version == 7
