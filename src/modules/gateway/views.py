"""Gateway API view.

``POST`` runs one operation through ``ShipmentGateway``; ``GET`` returns
the operation schema.  The view is open to anonymous callers: the
gateway itself decides which operations need an identity or a role.
``GatewayError`` is translated into the error envelope here; anything
else propagates to the DRF exception handler.
"""

from __future__ import annotations

import structlog
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.gateway.exceptions import GatewayError
from modules.gateway.gateway import ShipmentGateway
from modules.gateway.operations import Operation
from modules.gateway.schema import SCHEMA_SDL
from modules.gateway.serializers import (
    GatewayErrorEnvelopeSerializer,
    GatewayRequestSerializer,
    GatewayResponseSerializer,
    GatewaySchemaSerializer,
)
from modules.identity.repositories import IdentityDjangoRepository
from modules.identity.services import IdentityService
from modules.shipments.repositories import ShipmentDjangoRepository
from modules.shipments.services import ShipmentService

logger = structlog.get_logger(__name__)


def build_gateway() -> ShipmentGateway:
    """Wire the gateway to the Django-backed services."""
    return ShipmentGateway(
        shipment_service=ShipmentService(repository=ShipmentDjangoRepository()),
        identity_service=IdentityService(repository=IdentityDjangoRepository()),
    )


class GraphQLView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Operation schema",
        responses={200: GatewaySchemaSerializer},
        auth=[],
    )
    def get(self, request: Request) -> Response:
        """GET /api/v1/graphql"""
        return Response(
            {"schema": SCHEMA_SDL, "operations": [op.value for op in Operation]}
        )

    @extend_schema(
        summary="Run a shipment operation",
        request=GatewayRequestSerializer,
        responses={
            200: GatewayResponseSerializer,
            400: GatewayErrorEnvelopeSerializer,
            401: GatewayErrorEnvelopeSerializer,
            403: GatewayErrorEnvelopeSerializer,
            404: GatewayErrorEnvelopeSerializer,
            500: GatewayErrorEnvelopeSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """POST /api/v1/graphql"""
        serializer = GatewayRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = serializer.validated_data

        caller_id = getattr(request.user, "user_id", None)
        try:
            data = build_gateway().dispatch(
                payload.get("query"),
                variables=payload.get("variables"),
                caller_id=caller_id,
                operation_name=payload.get("operationName"),
            )
        except GatewayError as exc:
            logger.info(
                "gateway.request_failed",
                code=exc.code,
                status_code=exc.status_code,
                caller_id=caller_id,
            )
            return Response(exc.as_envelope(), status=exc.status_code)

        return Response({"data": data})
