"""DRF exception handler rendering every failure in the gateway envelope.

Clients always receive ``{"errors": [{"message": ..., "extensions":
{"code": ...}}]}``, whether the failure came from the gateway itself,
from DRF (malformed JSON, bad credentials, throttling) or from an
unexpected exception, which is logged with its traceback.
"""

from __future__ import annotations

from typing import Any

import structlog
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)

_CODES = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHENTICATED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: "UNSUPPORTED_MEDIA_TYPE",
    status.HTTP_429_TOO_MANY_REQUESTS: "THROTTLED",
}


def error_envelope(message: str, code: str) -> dict[str, Any]:
    return {"errors": [{"message": message, "extensions": {"code": code}}]}


def _flatten(detail: Any) -> list[str]:
    if isinstance(detail, dict):
        messages = []
        for field, value in detail.items():
            for message in _flatten(value):
                messages.append(
                    message if field == "non_field_errors" else f"{field}: {message}"
                )
        return messages
    if isinstance(detail, list):
        return [message for item in detail for message in _flatten(item)]
    return [str(detail)]


def envelope_exception_handler(exc: Exception, context: dict) -> Response:
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "unhandled_exception",
            view=type(view).__name__ if view else None,
            error=str(exc),
        )
        return Response(
            error_envelope("Internal server error", "INTERNAL"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    detail = exc.detail if isinstance(exc, exceptions.APIException) else str(exc)
    code = _CODES.get(response.status_code, "ERROR")
    response.data = {
        "errors": [
            {"message": message, "extensions": {"code": code}}
            for message in _flatten(detail)
        ]
    }
    return response
