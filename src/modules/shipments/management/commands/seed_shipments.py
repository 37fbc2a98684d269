from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.shipments.constants import (
    KNOWN_CARRIERS,
    ShipmentPriority,
    ShipmentStatus,
    ShipmentType,
)
from modules.shipments.models import Shipment

_CITIES = [
    "New York, NY",
    "Los Angeles, CA",
    "Chicago, IL",
    "Houston, TX",
    "Seattle, WA",
    "Miami, FL",
    "Rotterdam, NL",
    "Hamburg, DE",
    "Shanghai, CN",
    "Singapore, SG",
]

_PARTIES = [
    "Acme Manufacturing",
    "Globex Retail",
    "Initech Supplies",
    "Umbrella Pharma",
    "Stark Components",
    "Wayne Logistics",
]


class Command(BaseCommand):
    help = "Seed the shipments table with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument(
            "--count", type=int, default=25, help="Number of shipments to create."
        )

    def handle(self, *args, **options):
        random.seed(42)
        count = options["count"]
        self.stdout.write(f"Seeding {count} shipments...")

        created = [self._seed_shipment() for _ in range(count)]

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: shipments={len(created)}, "
                f"total={Shipment.objects.count()}"
            )
        )

    def _seed_shipment(self) -> Shipment:
        today = timezone.now().date()
        origin, destination = random.sample(_CITIES, 2)
        status = random.choice(ShipmentStatus.values)
        estimated = today + timedelta(days=random.randint(-10, 20))
        customer = random.choice(_PARTIES)

        shipment = Shipment(
            origin=origin,
            destination=destination,
            status=status,
            carrier=random.choice(KNOWN_CARRIERS),
            weight=round(random.uniform(0.5, 2500), 2),
            dimensions=f"{random.randint(10, 120)}x{random.randint(10, 120)}x{random.randint(10, 120)} cm",
            estimated_delivery=estimated,
            actual_delivery=estimated if status == ShipmentStatus.DELIVERED else None,
            shipper=random.choice(_PARTIES),
            consignee=customer,
            customer_name=customer,
            customer_email=f"ops@{customer.split()[0].lower()}.example.com",
            priority=random.choice(ShipmentPriority.values),
            type=random.choice(ShipmentType.values),
            cost=Decimal(random.randint(2000, 500000)) / 100,
            created_by="seed",
        )
        shipment.save()
        return shipment
