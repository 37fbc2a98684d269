"""Identity service layer.

Answers who the caller is and what they may do.  Role checks consult the
``user_roles`` table on every call; nothing is cached across requests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog

from modules.identity.models import AppRole, Profile, UserRole

if TYPE_CHECKING:
    from modules.identity.repositories.interfaces import IIdentityRepository

logger = structlog.get_logger(__name__)


class IdentityService:
    """Application service for identity look-ups.

    Receives an ``IIdentityRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IIdentityRepository) -> None:
        self._repo = repository

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self._repo.get_profile(user_id)

    def get_role(self, user_id: str) -> Optional[UserRole]:
        return self._repo.get_role(user_id)

    def is_admin(self, user_id: str) -> bool:
        """True only when the identity holds the ``admin`` role."""
        user_role = self._repo.get_role(user_id)
        return user_role is not None and user_role.role == AppRole.ADMIN

    def grant_role(self, user_id: str, role: str) -> UserRole:
        """Grant ``role`` to ``user_id``.

        Raises:
            ValueError: if ``role`` is not a known role.
        """
        if role not in AppRole.values:
            raise ValueError(f"Unknown role '{role}'. Expected one of {AppRole.values}.")
        user_role = self._repo.set_role(user_id, role)
        logger.info("identity.role_granted", user_id=user_id, role=role)
        return user_role
