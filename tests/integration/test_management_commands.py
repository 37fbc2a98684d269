from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from modules.identity.models import AppRole, UserRole
from modules.shipments.models import Shipment

pytestmark = pytest.mark.integration


class TestSeedShipments:
    def test_creates_requested_count(self):
        out = StringIO()
        call_command("seed_shipments", count=5, stdout=out)

        assert Shipment.objects.count() == 5
        assert "shipments=5" in out.getvalue()

    def test_seeded_rows_respect_delivery_rule(self):
        call_command("seed_shipments", count=20, stdout=StringIO())

        for shipment in Shipment.objects.all():
            if shipment.actual_delivery is not None:
                assert shipment.status == "delivered"
            assert shipment.tracking_number.startswith("TMS-")
            assert shipment.created_by == "seed"

    def test_tracking_numbers_unique(self):
        call_command("seed_shipments", count=10, stdout=StringIO())
        numbers = list(Shipment.objects.values_list("tracking_number", flat=True))
        assert len(set(numbers)) == len(numbers)


class TestGrantRole:
    def test_grants_admin(self):
        out = StringIO()
        call_command("grant_role", "user-42", "admin", stdout=out)

        assert UserRole.objects.get(user_id="user-42").role == AppRole.ADMIN
        assert "Granted role=admin to user_id=user-42" in out.getvalue()

    def test_regrant_replaces_role(self):
        call_command("grant_role", "user-42", "admin", stdout=StringIO())
        call_command("grant_role", "user-42", "employee", stdout=StringIO())

        assert UserRole.objects.filter(user_id="user-42").count() == 1
        assert UserRole.objects.get(user_id="user-42").role == AppRole.EMPLOYEE

    def test_unknown_role_rejected(self):
        with pytest.raises(CommandError):
            call_command("grant_role", "user-42", "superuser", stdout=StringIO())
        assert not UserRole.objects.filter(user_id="user-42").exists()
