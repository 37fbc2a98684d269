"""Bearer JWT authentication against the external identity provider.

The identity provider issues JWTs whose ``sub`` claim is the user
identity.  Tokens are verified with PyJWT either against a shared secret
(``IDENTITY_JWT_SECRET``, HS256 by default) or, when
``IDENTITY_JWKS_URL`` is set, against the provider's published keys.
JWKS keys are cached in-memory (300 s) via ``PyJWKClient``.

Security decisions
------------------
* **Fail Closed**: any decode / validation error returns 401.
* ``algorithms`` is taken from settings, never from the incoming token.
* Audience is validated when configured, issuer likewise.
* A missing ``Authorization`` header is anonymous, not an error: the
  gateway decides which operations need an identity.
"""

from __future__ import annotations

from functools import lru_cache

import jwt as pyjwt
import structlog
from django.conf import settings
from jwt import PyJWKClient
from jwt.exceptions import PyJWTError

from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = structlog.get_logger(__name__)


@lru_cache(maxsize=4)
def _jwks_client(url: str) -> PyJWKClient:
    return PyJWKClient(url, cache_jwk_set=True, lifespan=300)


class IdentityUser:
    """Lightweight user object for requests carrying a verified token.

    The identity provider is the source of truth; there is no local
    Django ``User`` row.  ``user_id`` is the opaque identity used for
    ``created_by`` stamps and role look-ups.
    """

    def __init__(self, payload: dict):
        self.payload = payload
        self.user_id: str = str(payload.get("sub", ""))
        self.email: str | None = payload.get("email")

    # DRF checks (throttling keys on ``pk``)
    is_authenticated = True
    is_active = True

    @property
    def pk(self) -> str:
        return self.user_id

    def __str__(self) -> str:  # pragma: no cover
        return self.user_id


class BearerTokenAuthentication(BaseAuthentication):
    """DRF authentication class that validates identity-provider Bearer tokens."""

    keyword = "Bearer"

    def authenticate(self, request):
        """Return ``(IdentityUser, token)`` or ``None`` (no credentials)."""
        header = request.META.get("HTTP_AUTHORIZATION", "")
        if not header:
            return None

        token = self._extract_token(header)
        payload = self._decode_token(token)
        if not payload.get("sub"):
            raise AuthenticationFailed("Token has no subject.")

        user = IdentityUser(payload)
        logger.info("jwt_authenticated", user_id=user.user_id)
        return (user, token)

    def authenticate_header(self, request):
        """Value for the ``WWW-Authenticate`` response header on 401."""
        return f'{self.keyword} realm="api"'

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @classmethod
    def _extract_token(cls, header: str) -> str:
        parts = header.split()
        if len(parts) != 2 or parts[0].lower() != cls.keyword.lower():
            raise AuthenticationFailed("Invalid Authorization header format.")
        return parts[1]

    @staticmethod
    def _signing_key(token: str):
        if settings.IDENTITY_JWKS_URL:
            return _jwks_client(settings.IDENTITY_JWKS_URL).get_signing_key_from_jwt(
                token
            ).key
        if not settings.IDENTITY_JWT_SECRET:
            raise AuthenticationFailed("Identity provider is not configured.")
        return settings.IDENTITY_JWT_SECRET

    @classmethod
    def _decode_token(cls, token: str) -> dict:
        audience = settings.IDENTITY_JWT_AUDIENCE or None
        issuer = settings.IDENTITY_JWT_ISSUER or None
        try:
            payload = pyjwt.decode(
                token,
                cls._signing_key(token),
                algorithms=[settings.IDENTITY_JWT_ALGORITHM],
                audience=audience,
                issuer=issuer,
                options={
                    "verify_aud": audience is not None,
                    "verify_iss": issuer is not None,
                },
            )
        except PyJWTError as exc:
            logger.warning("jwt_validation_failed", error=str(exc))
            raise AuthenticationFailed(f"Token validation failed: {exc}") from exc
        return payload
