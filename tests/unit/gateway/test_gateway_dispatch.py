"""Unit tests for ShipmentGateway.

Services are replaced with MagicMocks, so these tests pin down the
gateway's own responsibilities: operation selection, identity and role
gating, argument validation and error translation.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from django.db import OperationalError

from modules.gateway.exceptions import (
    Forbidden,
    NotFound,
    StoreError,
    Unauthenticated,
    UnrecognizedOperation,
    ValidationError,
)
from modules.gateway.gateway import ShipmentGateway
from modules.gateway.operations import Operation
from modules.identity.models import AppRole, Profile, UserRole
from modules.shipments.dtos import PageInfoDTO, ShipmentConnectionDTO
from modules.shipments.exceptions import (
    InvalidShipmentFilter,
    InvalidShipmentState,
    ShipmentNotFound,
)
from modules.shipments.models import Shipment, TrackingNumberExhausted

pytestmark = pytest.mark.unit

CALLER = "user-123"

LIST = "query GetShipments($filter: ShipmentFilterInput) { shipments(filter: $filter) { edges { id } } }"
GET = "query GetShipment($id: ID!) { shipment(id: $id) { id } }"
ME = "query { me { id } }"
MY_ROLE = "query { myRole { role } }"
CREATE = "mutation CreateShipment($input: CreateShipmentInput!) { createShipment(input: $input) { id } }"
UPDATE = "mutation UpdateShipment($id: ID!, $input: UpdateShipmentInput!) { updateShipment(id: $id, input: $input) { id } }"
DELETE = "mutation DeleteShipment($id: ID!) { deleteShipment(id: $id) }"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def shipment_service():
    service = MagicMock()
    service.list_shipments.return_value = ShipmentConnectionDTO(
        edges=[], page_info=PageInfoDTO.build(page=1, limit=10, total_count=0)
    )
    return service


@pytest.fixture()
def identity_service():
    service = MagicMock()
    service.is_admin.return_value = True
    return service


@pytest.fixture()
def gateway(shipment_service, identity_service):
    return ShipmentGateway(shipment_service, identity_service)


def _shipment(**overrides) -> Shipment:
    now = datetime(2024, 4, 20, 10, 0, tzinfo=timezone.utc)
    defaults = {
        "id": uuid.uuid4(),
        "tracking_number": "TMS-2024-000001",
        "origin": "A",
        "destination": "B",
        "carrier": "UPS",
        "created_by": CALLER,
        "created_at": now,
        "updated_at": now,
    }
    defaults.update(overrides)
    return Shipment(**defaults)


# ===========================================================================
# Operation selection
# ===========================================================================


class TestSelectOperation:
    @pytest.mark.parametrize(
        "query, expected",
        [
            (LIST, Operation.SHIPMENTS),
            (GET, Operation.SHIPMENT),
            (ME, Operation.ME),
            (MY_ROLE, Operation.MY_ROLE),
            (CREATE, Operation.CREATE_SHIPMENT),
            (UPDATE, Operation.UPDATE_SHIPMENT),
            (DELETE, Operation.DELETE_SHIPMENT),
        ],
    )
    def test_recognises_each_operation(self, gateway, query, expected):
        assert gateway.select_operation(query) is expected

    def test_mutation_field_under_query_rejected(self, gateway):
        with pytest.raises(UnrecognizedOperation):
            gateway.select_operation("query { deleteShipment(id: $id) }")

    def test_query_field_under_mutation_rejected(self, gateway):
        with pytest.raises(UnrecognizedOperation):
            gateway.select_operation("mutation { shipments { edges { id } } }")

    def test_unknown_field_rejected(self, gateway):
        with pytest.raises(UnrecognizedOperation):
            gateway.select_operation("query { customers { id } }")

    def test_operation_name_must_match(self, gateway):
        assert gateway.select_operation(LIST, "GetShipments") is Operation.SHIPMENTS
        with pytest.raises(UnrecognizedOperation):
            gateway.select_operation(LIST, "DeleteShipment")

    @pytest.mark.parametrize("query", [None, "", "   ", 42])
    def test_missing_document(self, gateway, query):
        with pytest.raises(UnrecognizedOperation):
            gateway.select_operation(query)


# ===========================================================================
# Gating
# ===========================================================================


class TestGating:
    @pytest.mark.parametrize("query", [LIST, GET, ME, MY_ROLE, CREATE, UPDATE, DELETE])
    def test_every_operation_requires_identity(
        self, gateway, shipment_service, identity_service, query
    ):
        with pytest.raises(Unauthenticated):
            gateway.dispatch(query, {"id": "x", "input": {}}, caller_id=None)

        assert shipment_service.method_calls == []
        identity_service.is_admin.assert_not_called()

    @pytest.mark.parametrize("query", [CREATE, UPDATE, DELETE])
    def test_mutations_require_admin(
        self, gateway, shipment_service, identity_service, query
    ):
        identity_service.is_admin.return_value = False

        with pytest.raises(Forbidden):
            gateway.dispatch(
                query,
                {"id": "x", "input": {"origin": "A", "destination": "B", "carrier": "UPS"}},
                caller_id=CALLER,
            )

        identity_service.is_admin.assert_called_once_with(CALLER)
        shipment_service.create_shipment.assert_not_called()
        shipment_service.update_shipment.assert_not_called()
        shipment_service.delete_shipment.assert_not_called()

    def test_reads_do_not_require_admin(self, gateway, identity_service):
        identity_service.is_admin.return_value = False
        gateway.dispatch(LIST, caller_id=CALLER)
        identity_service.is_admin.assert_not_called()

    def test_unrecognized_before_identity_check(self, gateway):
        with pytest.raises(UnrecognizedOperation):
            gateway.dispatch("query { nope }", caller_id=None)


# ===========================================================================
# Queries
# ===========================================================================


class TestQueries:
    def test_list_returns_wire_connection(self, gateway, shipment_service):
        result = gateway.dispatch(LIST, {"filter": {"status": "pending"}}, caller_id=CALLER)

        assert result == {
            "shipments": {
                "edges": [],
                "pageInfo": {
                    "hasNextPage": False,
                    "hasPreviousPage": False,
                    "totalCount": 0,
                    "totalPages": 0,
                    "currentPage": 1,
                },
            }
        }
        dto = shipment_service.list_shipments.call_args.args[0]
        assert dto.filter.to_filters() == {"status": "pending"}

    def test_list_ignores_unrelated_variables(self, gateway, shipment_service):
        gateway.dispatch(LIST, {"page": 2, "unused": True}, caller_id=CALLER)
        assert shipment_service.list_shipments.call_args.args[0].page == 2

    def test_list_with_mutation_keyword_in_comment(self, gateway, shipment_service):
        query = "# deleteShipment(id: $id)\n" + LIST
        result = gateway.dispatch(query, caller_id=CALLER)

        assert "shipments" in result
        shipment_service.delete_shipment.assert_not_called()

    @pytest.mark.parametrize("limit", [0, -1, 101])
    def test_list_invalid_limit(self, gateway, shipment_service, limit):
        with pytest.raises(ValidationError):
            gateway.dispatch(LIST, {"limit": limit}, caller_id=CALLER)
        shipment_service.list_shipments.assert_not_called()

    def test_list_rejected_filter_is_bad_input(self, gateway, shipment_service):
        shipment_service.list_shipments.side_effect = InvalidShipmentFilter(
            "search: Null characters are not allowed."
        )
        with pytest.raises(ValidationError) as exc_info:
            gateway.dispatch(LIST, {"filter": {"search": "a\x00b"}}, caller_id=CALLER)
        assert exc_info.value.code == "BAD_USER_INPUT"
        assert "Null characters" in exc_info.value.message

    def test_get_returns_wire_record(self, gateway, shipment_service):
        shipment = _shipment()
        shipment_service.get_shipment.return_value = shipment

        result = gateway.dispatch(GET, {"id": str(shipment.id)}, caller_id=CALLER)

        assert result["shipment"]["id"] == str(shipment.id)
        assert result["shipment"]["trackingNumber"] == "TMS-2024-000001"
        assert result["shipment"]["createdBy"] == CALLER

    def test_get_missing_returns_null(self, gateway, shipment_service):
        shipment_service.get_shipment.return_value = None
        assert gateway.dispatch(GET, {"id": "nope"}, caller_id=CALLER) == {"shipment": None}

    def test_get_requires_id(self, gateway):
        with pytest.raises(ValidationError):
            gateway.dispatch(GET, {}, caller_id=CALLER)

    def test_me(self, gateway, identity_service):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        identity_service.get_profile.return_value = Profile(
            id=CALLER, email="ann@acme.com", full_name="Ann", created_at=now, updated_at=now
        )

        result = gateway.dispatch(ME, caller_id=CALLER)

        assert result["me"]["fullName"] == "Ann"
        assert result["me"]["avatarUrl"] is None
        identity_service.get_profile.assert_called_once_with(CALLER)

    def test_me_without_profile(self, gateway, identity_service):
        identity_service.get_profile.return_value = None
        assert gateway.dispatch(ME, caller_id=CALLER) == {"me": None}

    def test_my_role(self, gateway, identity_service):
        identity_service.get_role.return_value = UserRole(
            user_id=CALLER, role=AppRole.EMPLOYEE, created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)
        )

        result = gateway.dispatch(MY_ROLE, caller_id=CALLER)

        assert result["myRole"]["userId"] == CALLER
        assert result["myRole"]["role"] == "employee"

    def test_variables_must_be_object(self, gateway):
        with pytest.raises(ValidationError):
            gateway.dispatch(LIST, ["not", "a", "map"], caller_id=CALLER)


# ===========================================================================
# Mutations
# ===========================================================================


class TestMutations:
    def test_create_stamps_caller(self, gateway, shipment_service):
        shipment_service.create_shipment.return_value = _shipment()

        result = gateway.dispatch(
            CREATE,
            {"input": {"origin": "A", "destination": "B", "carrier": "UPS", "priority": "high"}},
            caller_id=CALLER,
        )

        dto = shipment_service.create_shipment.call_args.args[0]
        assert dto.priority == "high"
        assert shipment_service.create_shipment.call_args.kwargs == {"created_by": CALLER}
        assert result["createShipment"]["trackingNumber"] == "TMS-2024-000001"

    def test_create_invalid_input(self, gateway, shipment_service):
        with pytest.raises(ValidationError) as exc_info:
            gateway.dispatch(CREATE, {"input": {"origin": "A"}}, caller_id=CALLER)

        assert "destination" in str(exc_info.value)
        shipment_service.create_shipment.assert_not_called()

    def test_create_requires_input(self, gateway):
        with pytest.raises(ValidationError):
            gateway.dispatch(CREATE, {}, caller_id=CALLER)

    def test_update_passes_patch(self, gateway, shipment_service):
        shipment_service.update_shipment.return_value = _shipment(status="in_transit")

        result = gateway.dispatch(
            UPDATE, {"id": "abc", "input": {"status": "in_transit"}}, caller_id=CALLER
        )

        shipment_id, dto = shipment_service.update_shipment.call_args.args
        assert shipment_id == "abc"
        assert dto.to_patch() == {"status": "in_transit"}
        assert result["updateShipment"]["status"] == "in_transit"

    def test_update_not_found(self, gateway, shipment_service):
        shipment_service.update_shipment.side_effect = ShipmentNotFound("Shipment abc not found.")
        with pytest.raises(NotFound):
            gateway.dispatch(UPDATE, {"id": "abc", "input": {"notes": "x"}}, caller_id=CALLER)

    def test_update_invalid_state(self, gateway, shipment_service):
        shipment_service.update_shipment.side_effect = InvalidShipmentState("bad")
        with pytest.raises(ValidationError):
            gateway.dispatch(
                UPDATE, {"id": "abc", "input": {"actualDelivery": "2024-05-01"}}, caller_id=CALLER
            )

    def test_delete(self, gateway, shipment_service):
        assert gateway.dispatch(DELETE, {"id": "abc"}, caller_id=CALLER) == {
            "deleteShipment": True
        }
        shipment_service.delete_shipment.assert_called_once_with("abc")

    def test_delete_not_found(self, gateway, shipment_service):
        shipment_service.delete_shipment.side_effect = ShipmentNotFound("missing")
        with pytest.raises(NotFound):
            gateway.dispatch(DELETE, {"id": "abc"}, caller_id=CALLER)


# ===========================================================================
# Store failures
# ===========================================================================


class TestStoreErrors:
    def test_database_error_becomes_store_error(self, gateway, shipment_service):
        shipment_service.list_shipments.side_effect = OperationalError("connection refused")

        with pytest.raises(StoreError) as exc_info:
            gateway.dispatch(LIST, caller_id=CALLER)

        assert "connection refused" in str(exc_info.value)

    def test_tracking_number_exhaustion(self, gateway, shipment_service):
        shipment_service.create_shipment.side_effect = TrackingNumberExhausted("exhausted")
        with pytest.raises(StoreError):
            gateway.dispatch(
                CREATE,
                {"input": {"origin": "A", "destination": "B", "carrier": "UPS"}},
                caller_id=CALLER,
            )

    def test_role_lookup_failure_becomes_store_error(self, gateway, identity_service):
        identity_service.is_admin.side_effect = OperationalError("db down")
        with pytest.raises(StoreError):
            gateway.dispatch(DELETE, {"id": "abc"}, caller_id=CALLER)


class TestErrorEnvelope:
    @pytest.mark.parametrize(
        "exc, status_code, code",
        [
            (Unauthenticated("x"), 401, "UNAUTHENTICATED"),
            (Forbidden("x"), 403, "FORBIDDEN"),
            (ValidationError("x"), 400, "BAD_USER_INPUT"),
            (NotFound("x"), 404, "NOT_FOUND"),
            (StoreError("x"), 500, "STORE_ERROR"),
            (UnrecognizedOperation("x"), 400, "UNRECOGNIZED_OPERATION"),
        ],
    )
    def test_status_and_code(self, exc, status_code, code):
        assert exc.status_code == status_code
        assert exc.as_envelope() == {
            "errors": [{"message": "x", "extensions": {"code": code}}]
        }
