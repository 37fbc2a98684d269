"""Identity repository interface.

Read-mostly access to the ``profiles`` and ``user_roles`` tables.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from modules.identity.models import Profile, UserRole


class IIdentityRepository(ABC):
    """Repository contract for profiles and roles."""

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[Profile]:
        """The caller's profile, or ``None``."""

    @abstractmethod
    def get_role(self, user_id: str) -> Optional[UserRole]:
        """The caller's role row, or ``None`` if no role was granted."""

    @abstractmethod
    def set_role(self, user_id: str, role: str) -> UserRole:
        """Grant ``role`` to ``user_id``, replacing any previous role."""
