"""Identity repositories package."""

from modules.identity.repositories.django_repository import IdentityDjangoRepository
from modules.identity.repositories.interfaces import IIdentityRepository

__all__ = ["IIdentityRepository", "IdentityDjangoRepository"]
