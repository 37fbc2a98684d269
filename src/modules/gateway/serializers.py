"""Gateway request/response serializers.

Only the envelope is validated here; the operation document and its
variables are the gateway's business.
"""

from __future__ import annotations

from rest_framework import serializers


class GatewayRequestSerializer(serializers.Serializer):
    """``{query, variables?, operationName?}``."""

    query = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    variables = serializers.DictField(required=False, allow_null=True)
    operationName = serializers.CharField(  # noqa: N815
        required=False, allow_blank=True, allow_null=True
    )


class GatewayErrorSerializer(serializers.Serializer):
    message = serializers.CharField()
    extensions = serializers.DictField()


class GatewayErrorEnvelopeSerializer(serializers.Serializer):
    errors = GatewayErrorSerializer(many=True)


class GatewayResponseSerializer(serializers.Serializer):
    data = serializers.DictField()


class GatewaySchemaSerializer(serializers.Serializer):
    schema = serializers.CharField()
    operations = serializers.ListField(child=serializers.CharField())
