import django_filters
from django.db.models import Q

from modules.shipments.constants import (
    SEARCH_FIELDS,
    ShipmentPriority,
    ShipmentStatus,
    ShipmentType,
)
from modules.shipments.models import Shipment


class ShipmentFilter(django_filters.FilterSet):
    """Equality filters ANDed together; ``search`` ORs across SEARCH_FIELDS."""

    status = django_filters.ChoiceFilter(choices=ShipmentStatus.choices)
    carrier = django_filters.CharFilter(field_name="carrier", lookup_expr="exact")
    priority = django_filters.ChoiceFilter(choices=ShipmentPriority.choices)
    type = django_filters.ChoiceFilter(choices=ShipmentType.choices)
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Shipment
        fields = ["status", "carrier", "priority", "type", "search"]

    def filter_search(self, queryset, name, value):
        condition = Q()
        for field in SEARCH_FIELDS:
            condition |= Q(**{f"{field}__icontains": value})
        return queryset.filter(condition)
