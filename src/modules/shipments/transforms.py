"""Wire <-> storage field transform.

The wire representation (JSON exchanged with clients) uses camelCase
names; the store uses snake_case.  Typed records (pydantic models whose
attribute names are the storage names and whose aliases are the wire
names) carry the values; the helpers here move a record from one naming
to the other.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Type, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

R = TypeVar("R", bound=BaseModel)

_UPPER = re.compile(r"[A-Z]")


def to_snake_case(name: str) -> str:
    """``estimatedDelivery`` -> ``estimated_delivery``."""
    return _UPPER.sub(lambda match: f"_{match.group(0).lower()}", name)


def to_camel_case(name: str) -> str:
    """``estimated_delivery`` -> ``estimatedDelivery``."""
    return to_camel(name)


def field_map(record_cls: Type[BaseModel]) -> Dict[str, str]:
    """Storage name -> wire name for every field of ``record_cls``."""
    return {
        name: field.alias or name for name, field in record_cls.model_fields.items()
    }


def to_wire(record: BaseModel) -> Dict[str, Any]:
    """JSON-ready dict keyed by wire names."""
    return record.model_dump(mode="json", by_alias=True)


def to_storage(record: BaseModel, *, partial: bool = False) -> Dict[str, Any]:
    """Dict keyed by storage names.

    With ``partial`` only the fields the caller actually supplied are kept.
    """
    return record.model_dump(exclude_unset=partial)


def from_storage(record_cls: Type[R], row: Mapping[str, Any]) -> R:
    """Typed record from a storage row (dict keyed by column names)."""
    return record_cls.model_validate(dict(row))


def from_entity(record_cls: Type[R], entity: Any) -> R:
    """Typed record read column by column from a model instance."""
    return from_storage(
        record_cls, {name: getattr(entity, name) for name in field_map(record_cls)}
    )
