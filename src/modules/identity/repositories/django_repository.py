"""Django ORM implementation of the identity repository."""

from __future__ import annotations

from typing import Optional

import structlog
from django.db import transaction

from modules.identity.models import Profile, UserRole
from modules.identity.repositories.interfaces import IIdentityRepository

logger = structlog.get_logger(__name__)


class IdentityDjangoRepository(IIdentityRepository):
    """Concrete identity repository backed by Django ORM."""

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return Profile.objects.filter(id=user_id).first()

    def get_role(self, user_id: str) -> Optional[UserRole]:
        return UserRole.objects.filter(user_id=user_id).first()

    @transaction.atomic
    def set_role(self, user_id: str, role: str) -> UserRole:
        user_role, created = UserRole.objects.update_or_create(
            user_id=user_id, defaults={"role": role}
        )
        logger.info("identity.role_set", user_id=user_id, role=role, created=created)
        return user_role
