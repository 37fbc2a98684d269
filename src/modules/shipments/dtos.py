"""Shipment DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the gateway and the Service layer.
DTOs are immutable (``frozen=True``).  Attribute names are the storage
(snake_case) names; every DTO also accepts and emits the wire (camelCase)
names through its alias generator, so the DTOs double as the field
transform between the two representations.

- ``CreateShipmentDTO``: input for shipment creation.
- ``UpdateShipmentDTO``: partial patch; only supplied fields are written.
- ``ListShipmentsDTO``: filter / sort / page / limit for listings.
- ``ShipmentRecord``: typed shipment row (output).
- ``ShipmentConnectionDTO``: one page of records plus ``PageInfoDTO``.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Any, Dict, List, Literal, Optional, Self
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from modules.shipments.constants import (
    ADDRESS_MAX_LENGTH,
    CARRIER_MAX_LENGTH,
    CUSTOMER_NAME_MAX_LENGTH,
    CUSTOMER_PHONE_MAX_LENGTH,
    DEFAULT_PAGE_SIZE,
    DIMENSIONS_MAX_LENGTH,
    MAX_PAGE_SIZE,
    NOTES_MAX_LENGTH,
    PARTY_MAX_LENGTH,
    SORTABLE_FIELDS,
    ShipmentPriority,
    ShipmentStatus,
    ShipmentType,
)
from modules.shipments.transforms import (
    from_entity,
    to_camel_case,
    to_snake_case,
    to_storage,
    to_wire,
)

if TYPE_CHECKING:
    from modules.shipments.models import Shipment


# ---------------------------------------------------------------------------
# Enums (framework-agnostic, not Django TextChoices)
# ---------------------------------------------------------------------------

ShipmentStatusEnum = StrEnum(
    "ShipmentStatusEnum", {member.name: member.value for member in ShipmentStatus}
)
ShipmentPriorityEnum = StrEnum(
    "ShipmentPriorityEnum", {member.name: member.value for member in ShipmentPriority}
)
ShipmentTypeEnum = StrEnum(
    "ShipmentTypeEnum", {member.name: member.value for member in ShipmentType}
)


# ---------------------------------------------------------------------------
# Field types
# ---------------------------------------------------------------------------

Address = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=ADDRESS_MAX_LENGTH),
]
Carrier = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=CARRIER_MAX_LENGTH),
]
Party = Annotated[str, StringConstraints(strip_whitespace=True, max_length=PARTY_MAX_LENGTH)]
Dimensions = Annotated[
    str, StringConstraints(strip_whitespace=True, max_length=DIMENSIONS_MAX_LENGTH)
]
CustomerName = Annotated[
    str, StringConstraints(strip_whitespace=True, max_length=CUSTOMER_NAME_MAX_LENGTH)
]
CustomerPhone = Annotated[
    str, StringConstraints(strip_whitespace=True, max_length=CUSTOMER_PHONE_MAX_LENGTH)
]
Notes = Annotated[str, StringConstraints(max_length=NOTES_MAX_LENGTH)]
Weight = Annotated[float, Field(ge=0)]
Cost = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]

_OPTIONAL_TEXT = (
    "dimensions",
    "shipper",
    "consignee",
    "customer_name",
    "customer_email",
    "customer_phone",
    "notes",
)

_REQUIRED_ON_UPDATE = ("origin", "destination", "status", "carrier", "priority", "type")

_WIRE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel_case,
    populate_by_name=True,
    extra="forbid",
)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateShipmentDTO(BaseModel):
    """Immutable DTO for shipment creation requests.

    ``origin``, ``destination`` and ``carrier`` are required.  Blank optional
    text is stored as ``None``; a missing or null ``priority`` / ``type``
    falls back to ``medium`` / ``standard``.
    """

    model_config = _WIRE_CONFIG

    origin: Address
    destination: Address
    carrier: Carrier
    weight: Optional[Weight] = None
    dimensions: Optional[Dimensions] = None
    estimated_delivery: Optional[date] = None
    shipper: Optional[Party] = None
    consignee: Optional[Party] = None
    customer_name: Optional[CustomerName] = None
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[CustomerPhone] = None
    priority: ShipmentPriorityEnum = ShipmentPriorityEnum.MEDIUM
    type: ShipmentTypeEnum = ShipmentTypeEnum.STANDARD
    cost: Optional[Cost] = None
    notes: Optional[Notes] = None

    @field_validator(*_OPTIONAL_TEXT, "estimated_delivery", mode="before")
    @classmethod
    def blank_text_is_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("priority", "type", mode="before")
    @classmethod
    def null_enum_uses_default(cls, v: Any, info) -> Any:
        if v is None or v == "":
            return cls.model_fields[info.field_name].default
        return v

    def to_storage(self) -> Dict[str, Any]:
        return to_storage(self)


class UpdateShipmentDTO(BaseModel):
    """Immutable DTO for shipment patches.

    Only the fields present in the request are part of the patch
    (``model_fields_set``).  An explicit null or blank string clears a
    nullable field; null on a required field is rejected.
    """

    model_config = _WIRE_CONFIG

    origin: Optional[Address] = None
    destination: Optional[Address] = None
    status: Optional[ShipmentStatusEnum] = None
    carrier: Optional[Carrier] = None
    weight: Optional[Weight] = None
    dimensions: Optional[Dimensions] = None
    estimated_delivery: Optional[date] = None
    actual_delivery: Optional[date] = None
    shipper: Optional[Party] = None
    consignee: Optional[Party] = None
    customer_name: Optional[CustomerName] = None
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[CustomerPhone] = None
    priority: Optional[ShipmentPriorityEnum] = None
    type: Optional[ShipmentTypeEnum] = None
    cost: Optional[Cost] = None
    notes: Optional[Notes] = None

    @field_validator(*_OPTIONAL_TEXT, "estimated_delivery", "actual_delivery", mode="before")
    @classmethod
    def blank_text_is_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @model_validator(mode="after")
    def required_fields_not_null(self) -> Self:
        for name in _REQUIRED_ON_UPDATE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel_case(name)} cannot be null.")
        return self

    def to_patch(self) -> Dict[str, Any]:
        """Storage-named fields supplied by the caller, and nothing else."""
        return to_storage(self, partial=True)


class ShipmentFilterDTO(BaseModel):
    """Equality filters plus a free-text ``search``; blanks are ignored."""

    model_config = _WIRE_CONFIG

    status: Optional[ShipmentStatusEnum] = None
    carrier: Optional[str] = None
    priority: Optional[ShipmentPriorityEnum] = None
    type: Optional[ShipmentTypeEnum] = None
    search: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def to_filters(self) -> Dict[str, Any]:
        return {
            key: value.strip() if key == "search" else value
            for key, value in self.model_dump().items()
            if value is not None
        }


class ShipmentSortDTO(BaseModel):
    """Sort order.  ``field`` arrives in wire naming (``createdAt``)."""

    model_config = _WIRE_CONFIG

    field: str = "createdAt"
    direction: Literal["asc", "desc"] = "desc"

    @field_validator("field")
    @classmethod
    def field_must_be_sortable(cls, v: str) -> str:
        if to_snake_case(v) not in SORTABLE_FIELDS:
            raise ValueError(f"Unsupported sort field '{v}'.")
        return v

    @field_validator("direction", mode="before")
    @classmethod
    def normalise_direction(cls, v: Any) -> Any:
        if v is None:
            return "desc"
        return v.lower() if isinstance(v, str) else v

    @property
    def storage_field(self) -> str:
        return to_snake_case(self.field)

    @property
    def ordering(self) -> List[str]:
        """Django ``order_by`` arguments, with ``id`` as a stable tie-breaker."""
        prefix = "-" if self.direction == "desc" else ""
        return [f"{prefix}{self.storage_field}", f"{prefix}id"]


class ListShipmentsDTO(BaseModel):
    """Listing request: ``filter``, ``sort``, 1-based ``page`` and ``limit``."""

    model_config = _WIRE_CONFIG

    filter: ShipmentFilterDTO = Field(default_factory=ShipmentFilterDTO)
    sort: ShipmentSortDTO = Field(default_factory=ShipmentSortDTO)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @field_validator("filter", "sort", "page", "limit", mode="before")
    @classmethod
    def null_uses_default(cls, v: Any, info) -> Any:
        if v is None:
            field = cls.model_fields[info.field_name]
            return field.get_default(call_default_factory=True)
        return v

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class ShipmentRecord(BaseModel):
    """Typed shipment row.

    Every column is declared without a default, so both directions of the
    transform are total: a row missing a column fails validation instead
    of being silently reshaped.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel_case, populate_by_name=True)

    id: UUID
    tracking_number: str
    origin: str
    destination: str
    status: str
    carrier: str
    weight: Optional[float]
    dimensions: Optional[str]
    estimated_delivery: Optional[date]
    actual_delivery: Optional[date]
    shipper: Optional[str]
    consignee: Optional[str]
    customer_name: Optional[str]
    customer_email: Optional[str]
    customer_phone: Optional[str]
    priority: str
    type: str
    cost: Optional[float]
    notes: Optional[str]
    created_by: Optional[str]
    created_at: datetime
    updated_at: datetime

    @field_validator("cost", mode="before")
    @classmethod
    def decimal_cost_as_float(cls, v: Any) -> Any:
        return float(v) if isinstance(v, Decimal) else v

    @classmethod
    def from_entity(cls, shipment: Shipment) -> ShipmentRecord:
        """Build a record from a Shipment model instance."""
        return from_entity(cls, shipment)

    def to_wire(self) -> Dict[str, Any]:
        return to_wire(self)


class PageInfoDTO(BaseModel):
    """Pagination metadata for a listing."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel_case, populate_by_name=True)

    has_next_page: bool
    has_previous_page: bool
    total_count: int
    total_pages: int
    current_page: int

    @classmethod
    def build(cls, page: int, limit: int, total_count: int) -> PageInfoDTO:
        total_pages = math.ceil(total_count / limit)
        return cls(
            has_next_page=page < total_pages,
            has_previous_page=page > 1,
            total_count=total_count,
            total_pages=total_pages,
            current_page=page,
        )


class ShipmentConnectionDTO(BaseModel):
    """One page of shipments."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel_case, populate_by_name=True)

    edges: List[ShipmentRecord]
    page_info: PageInfoDTO

    def to_wire(self) -> Dict[str, Any]:
        return to_wire(self)
