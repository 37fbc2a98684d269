import time

import jwt
import pytest
from django.conf import settings

from rest_framework.test import APIClient

from modules.identity.models import AppRole, UserRole
from modules.shipments.models import Shipment

ADMIN_ID = "admin-0001"
EMPLOYEE_ID = "employee-0001"


def make_token(sub: str, **claims) -> str:
    """Sign a token the way the identity provider does."""
    payload = {
        "sub": sub,
        "aud": settings.IDENTITY_JWT_AUDIENCE,
        "exp": int(time.time()) + 3600,
        **claims,
    }
    return jwt.encode(
        payload, settings.IDENTITY_JWT_SECRET, algorithm=settings.IDENTITY_JWT_ALGORITHM
    )


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def admin_client():
    """APIClient carrying a token for an identity with the admin role."""
    UserRole.objects.create(user_id=ADMIN_ID, role=AppRole.ADMIN)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(ADMIN_ID)}")
    return client


@pytest.fixture()
def employee_client():
    """APIClient carrying a token for an identity with the employee role."""
    UserRole.objects.create(user_id=EMPLOYEE_ID, role=AppRole.EMPLOYEE)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(EMPLOYEE_ID)}")
    return client


@pytest.fixture()
def make_shipment():
    """Factory persisting a shipment with sensible defaults."""

    def _make(**overrides) -> Shipment:
        data = {
            "origin": "New York, NY",
            "destination": "Chicago, IL",
            "carrier": "FedEx",
        }
        data.update(overrides)
        shipment = Shipment(**data)
        shipment.save()
        return shipment

    return _make


@pytest.fixture()
def graphql(api_client):
    """POST an operation to the gateway with the given client."""

    def _post(query, variables=None, client=None, **extra):
        body = {"query": query}
        if variables is not None:
            body["variables"] = variables
        body.update(extra)
        return (client or api_client).post("/api/v1/graphql", body, format="json")

    return _post


@pytest.fixture()
def token_factory():
    """``token_factory(sub, **claims)`` -> signed bearer token."""
    return make_token
