"""HTTP client for the shipment gateway.

Posts ``{query, variables}`` documents to ``/api/v1/graphql`` with the
caller's bearer token and unwraps the ``data`` / ``errors`` envelope.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)

GATEWAY_PATH = "/api/v1/graphql"

SHIPMENT_FIELDS = """
    id
    trackingNumber
    origin
    destination
    status
    carrier
    weight
    dimensions
    estimatedDelivery
    actualDelivery
    shipper
    consignee
    customerName
    customerEmail
    customerPhone
    priority
    type
    cost
    notes
    createdBy
    createdAt
    updatedAt
"""

GET_SHIPMENTS = f"""
query GetShipments($filter: ShipmentFilterInput, $sort: ShipmentSortInput, $page: Int, $limit: Int) {{
  shipments(filter: $filter, sort: $sort, page: $page, limit: $limit) {{
    edges {{ {SHIPMENT_FIELDS} }}
    pageInfo {{ hasNextPage hasPreviousPage totalCount totalPages currentPage }}
  }}
}}
"""

GET_SHIPMENT = f"""
query GetShipment($id: ID!) {{
  shipment(id: $id) {{ {SHIPMENT_FIELDS} }}
}}
"""

GET_ME = """
query GetMe {
  me { id email fullName avatarUrl createdAt updatedAt }
}
"""

GET_MY_ROLE = """
query GetMyRole {
  myRole { id userId role createdAt }
}
"""

CREATE_SHIPMENT = f"""
mutation CreateShipment($input: CreateShipmentInput!) {{
  createShipment(input: $input) {{ {SHIPMENT_FIELDS} }}
}}
"""

UPDATE_SHIPMENT = f"""
mutation UpdateShipment($id: ID!, $input: UpdateShipmentInput!) {{
  updateShipment(id: $id, input: $input) {{ {SHIPMENT_FIELDS} }}
}}
"""

DELETE_SHIPMENT = """
mutation DeleteShipment($id: ID!) {
  deleteShipment(id: $id)
}
"""


class GatewayRequestError(Exception):
    """The gateway answered with an error envelope or a non-2xx status."""

    def __init__(
        self, message: str, status_code: Optional[int] = None, code: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class GatewayClient:
    """Synchronous gateway client.

    ``token`` is the identity provider's access token; omit it to call
    as an anonymous client (every operation will then be refused).
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.client = httpx.Client(
            base_url=self.base_url, headers=headers, timeout=timeout, transport=transport
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> GatewayClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def execute(
        self, query: str, variables: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """Run one operation document and return its ``data`` object.

        Raises:
            GatewayRequestError: on transport failure, a non-2xx status or
                an ``errors`` envelope (first message surfaced).
        """
        payload: Dict[str, Any] = {"query": query}
        if variables is not None:
            payload["variables"] = dict(variables)

        try:
            response = self.client.post(GATEWAY_PATH, json=payload)
        except httpx.HTTPError as exc:
            logger.error("gateway_client.transport_error", error=str(exc))
            raise GatewayRequestError(f"Gateway unreachable: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        errors = body.get("errors")
        if errors:
            first = errors[0]
            code = (first.get("extensions") or {}).get("code")
            logger.warning(
                "gateway_client.request_failed",
                status_code=response.status_code,
                code=code,
            )
            raise GatewayRequestError(
                first.get("message", "Request failed"), response.status_code, code
            )
        if response.is_error:
            raise GatewayRequestError(
                f"Gateway returned HTTP {response.status_code}", response.status_code
            )
        return body.get("data") or {}

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def list_shipments(
        self,
        filter: Optional[Mapping[str, Any]] = None,
        sort: Optional[Mapping[str, Any]] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Dict[str, Any]:
        variables: Dict[str, Any] = {"page": page, "limit": limit}
        if filter:
            variables["filter"] = dict(filter)
        if sort:
            variables["sort"] = dict(sort)
        return self.execute(GET_SHIPMENTS, variables)["shipments"]

    def get_shipment(self, id: str) -> Optional[Dict[str, Any]]:
        return self.execute(GET_SHIPMENT, {"id": id})["shipment"]

    def me(self) -> Optional[Dict[str, Any]]:
        return self.execute(GET_ME)["me"]

    def my_role(self) -> Optional[Dict[str, Any]]:
        return self.execute(GET_MY_ROLE)["myRole"]

    def create_shipment(self, input: Mapping[str, Any]) -> Dict[str, Any]:
        return self.execute(CREATE_SHIPMENT, {"input": dict(input)})["createShipment"]

    def update_shipment(self, id: str, input: Mapping[str, Any]) -> Dict[str, Any]:
        return self.execute(UPDATE_SHIPMENT, {"id": id, "input": dict(input)})[
            "updateShipment"
        ]

    def delete_shipment(self, id: str) -> bool:
        return self.execute(DELETE_SHIPMENT, {"id": id})["deleteShipment"]
