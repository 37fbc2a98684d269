"""Query/Command gateway.

Turns one request (operation document + variables + caller identity)
into one service call:

1. select the operation from the document's grammatical structure;
2. require an identity, and the ``admin`` role for mutations;
3. validate the arguments into DTOs;
4. run the use-case and reshape the result into wire form.

Every failure leaves as a ``GatewayError`` subclass.  Domain exceptions,
pydantic validation errors and database errors are translated here and
nowhere else.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional

import structlog
from django.db import DatabaseError
from pydantic import ValidationError as PydanticValidationError

from modules.gateway.exceptions import (
    Forbidden,
    NotFound,
    StoreError,
    Unauthenticated,
    UnrecognizedOperation,
    ValidationError,
)
from modules.gateway.operations import MUTATIONS, Operation
from modules.gateway.parser import OperationSyntaxError, parse_operation
from modules.identity.dtos import ProfileRecord, UserRoleRecord
from modules.shipments.dtos import (
    CreateShipmentDTO,
    ListShipmentsDTO,
    ShipmentRecord,
    UpdateShipmentDTO,
)
from modules.shipments.exceptions import (
    InvalidShipmentFilter,
    InvalidShipmentState,
    ShipmentNotFound,
)
from modules.shipments.models import TrackingNumberExhausted

if TYPE_CHECKING:
    from modules.identity.services import IdentityService
    from modules.shipments.services import ShipmentService

logger = structlog.get_logger(__name__)

Variables = Mapping[str, Any]
Resolver = Callable[[Variables, str], Any]

_LIST_ARGUMENTS = ("filter", "sort", "page", "limit")


def _format_validation_error(exc: PydanticValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(messages)


def _require(variables: Variables, name: str) -> Any:
    value = variables.get(name)
    if value is None:
        raise ValidationError(f"Variable '{name}' is required.")
    return value


class ShipmentGateway:
    """Dispatches the seven known operations.

    Services are injected so tests can substitute fakes; the view builds
    a fresh gateway per request.
    """

    def __init__(
        self, shipment_service: ShipmentService, identity_service: IdentityService
    ) -> None:
        self._shipments = shipment_service
        self._identity = identity_service
        self._resolvers: Dict[Operation, Resolver] = {
            Operation.SHIPMENTS: self._list_shipments,
            Operation.SHIPMENT: self._get_shipment,
            Operation.ME: self._me,
            Operation.MY_ROLE: self._my_role,
            Operation.CREATE_SHIPMENT: self._create_shipment,
            Operation.UPDATE_SHIPMENT: self._update_shipment,
            Operation.DELETE_SHIPMENT: self._delete_shipment,
        }

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def dispatch(
        self,
        query: Any,
        variables: Optional[Variables] = None,
        caller_id: Optional[str] = None,
        operation_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Run one operation and return ``{<operation>: <result>}``.

        Raises:
            UnrecognizedOperation: the document does not name exactly one
                known operation.
            Unauthenticated: no caller identity.
            Forbidden: a mutation by a caller without the admin role.
            ValidationError: missing or invalid arguments.
            NotFound: update/delete of an unknown shipment.
            StoreError: the store failed the action.
        """
        operation = self.select_operation(query, operation_name)
        log = logger.bind(operation=operation.value, caller_id=caller_id)

        if caller_id is None:
            log.warning("gateway.unauthenticated")
            raise Unauthenticated("Authentication required.")

        if variables is None:
            variables = {}
        elif not isinstance(variables, Mapping):
            raise ValidationError("Variables must be an object.")

        try:
            if operation in MUTATIONS and not self._identity.is_admin(caller_id):
                log.warning("gateway.forbidden")
                raise Forbidden("Admin role required.")
            result = self._resolvers[operation](variables, caller_id)
        except PydanticValidationError as exc:
            log.info("gateway.invalid_arguments", errors=exc.error_count())
            raise ValidationError(_format_validation_error(exc)) from exc
        except (InvalidShipmentFilter, InvalidShipmentState) as exc:
            raise ValidationError(str(exc)) from exc
        except ShipmentNotFound as exc:
            raise NotFound(str(exc)) from exc
        except TrackingNumberExhausted as exc:
            log.error("gateway.tracking_number_exhausted")
            raise StoreError(str(exc)) from exc
        except DatabaseError as exc:
            log.exception("gateway.store_error")
            raise StoreError(str(exc)) from exc

        log.info("gateway.dispatched")
        return {operation.value: result}

    def select_operation(self, query: Any, operation_name: Optional[str] = None) -> Operation:
        """Identify the requested operation from the document structure."""
        if not isinstance(query, str) or not query.strip():
            raise UnrecognizedOperation("No operation document supplied.")

        try:
            parsed = parse_operation(query)
        except OperationSyntaxError as exc:
            raise UnrecognizedOperation(f"Unrecognized operation: {exc}") from exc

        if operation_name and operation_name != parsed.name:
            raise UnrecognizedOperation(
                f"Operation '{operation_name}' not found in document."
            )

        try:
            operation = Operation(parsed.field)
        except ValueError:
            raise UnrecognizedOperation(
                f"Unknown operation '{parsed.field}'."
            ) from None

        if operation.kind != parsed.operation_type:
            raise UnrecognizedOperation(
                f"'{operation.value}' is not a {parsed.operation_type} field."
            )
        return operation

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _list_shipments(self, variables: Variables, caller_id: str) -> Dict[str, Any]:
        dto = ListShipmentsDTO.model_validate(
            {name: variables[name] for name in _LIST_ARGUMENTS if name in variables}
        )
        return self._shipments.list_shipments(dto).to_wire()

    def _get_shipment(self, variables: Variables, caller_id: str) -> Optional[Dict[str, Any]]:
        shipment = self._shipments.get_shipment(str(_require(variables, "id")))
        if shipment is None:
            return None
        return ShipmentRecord.from_entity(shipment).to_wire()

    def _me(self, variables: Variables, caller_id: str) -> Optional[Dict[str, Any]]:
        profile = self._identity.get_profile(caller_id)
        return ProfileRecord.from_entity(profile).to_wire() if profile else None

    def _my_role(self, variables: Variables, caller_id: str) -> Optional[Dict[str, Any]]:
        user_role = self._identity.get_role(caller_id)
        return UserRoleRecord.from_entity(user_role).to_wire() if user_role else None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _create_shipment(self, variables: Variables, caller_id: str) -> Dict[str, Any]:
        dto = CreateShipmentDTO.model_validate(_require(variables, "input"))
        shipment = self._shipments.create_shipment(dto, created_by=caller_id)
        return ShipmentRecord.from_entity(shipment).to_wire()

    def _update_shipment(self, variables: Variables, caller_id: str) -> Dict[str, Any]:
        shipment_id = str(_require(variables, "id"))
        dto = UpdateShipmentDTO.model_validate(_require(variables, "input"))
        shipment = self._shipments.update_shipment(shipment_id, dto)
        return ShipmentRecord.from_entity(shipment).to_wire()

    def _delete_shipment(self, variables: Variables, caller_id: str) -> bool:
        self._shipments.delete_shipment(str(_require(variables, "id")))
        return True
