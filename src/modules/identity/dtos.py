"""Identity records in wire form (camelCase aliases)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from modules.shipments.transforms import from_entity, to_camel_case, to_wire

if TYPE_CHECKING:
    from modules.identity.models import Profile, UserRole

_RECORD_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel_case, populate_by_name=True)


class ProfileRecord(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    email: Optional[str]
    full_name: Optional[str]
    avatar_url: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile) -> ProfileRecord:
        return from_entity(cls, profile)

    def to_wire(self) -> Dict[str, Any]:
        return to_wire(self)


class UserRoleRecord(BaseModel):
    model_config = _RECORD_CONFIG

    id: UUID
    user_id: str
    role: str
    created_at: datetime

    @classmethod
    def from_entity(cls, user_role: UserRole) -> UserRoleRecord:
        return from_entity(cls, user_role)

    def to_wire(self) -> Dict[str, Any]:
        return to_wire(self)
