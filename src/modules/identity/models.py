"""Identity models.

Identities are issued by the external identity provider; this service
only stores the profile it mirrors and the role granted to it.  The
identity (the token ``sub``) is an opaque string.
"""

from __future__ import annotations

import uuid6
from django.db import models


class AppRole(models.TextChoices):
    ADMIN = "admin", "Admin"
    EMPLOYEE = "employee", "Employee"


class Profile(models.Model):
    """Per-identity profile, keyed by the identity itself."""

    id: models.CharField = models.CharField(primary_key=True, max_length=255)
    email: models.EmailField = models.EmailField(max_length=255, null=True, blank=True)  # noqa: DJ01
    full_name: models.CharField = models.CharField(  # noqa: DJ01
        max_length=200, null=True, blank=True
    )
    avatar_url: models.URLField = models.URLField(  # noqa: DJ01
        max_length=500, null=True, blank=True
    )
    created_at: models.DateTimeField = models.DateTimeField(auto_now_add=True)
    updated_at: models.DateTimeField = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "profiles"

    def __str__(self) -> str:
        return self.email or self.id


class UserRole(models.Model):
    """Exactly one role per identity."""

    id: models.UUIDField = models.UUIDField(primary_key=True, default=uuid6.uuid7, editable=False)
    user_id: models.CharField = models.CharField(max_length=255, unique=True)
    role: models.CharField = models.CharField(
        max_length=20, choices=AppRole.choices, default=AppRole.EMPLOYEE
    )
    created_at: models.DateTimeField = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "user_roles"

    def __str__(self) -> str:
        return f"{self.user_id} ({self.role})"
