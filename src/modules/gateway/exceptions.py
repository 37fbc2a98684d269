"""Gateway error taxonomy.

Every failure a gateway request can end in is one of these.  Each carries
the HTTP status and the ``extensions.code`` it is rendered with.
"""

from __future__ import annotations

from typing import Any, Dict

from rest_framework import status

from modules.core.exception_handler import error_envelope


class GatewayError(Exception):
    """Base class; ``str(exc)`` is the client-facing message."""

    code = "INTERNAL"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def as_envelope(self) -> Dict[str, Any]:
        return error_envelope(self.message, self.code)


class Unauthenticated(GatewayError):
    code = "UNAUTHENTICATED"
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(GatewayError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN


class ValidationError(GatewayError):
    code = "BAD_USER_INPUT"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(GatewayError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class StoreError(GatewayError):
    """The record store rejected or failed the action."""

    code = "STORE_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UnrecognizedOperation(GatewayError):
    code = "UNRECOGNIZED_OPERATION"
    status_code = status.HTTP_400_BAD_REQUEST
