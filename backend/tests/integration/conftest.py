"""
App-level fixtures: a TestClient over seeded services and bearer tokens.
"""
import pytest
from fastapi.testclient import TestClient

from repairdesk.api.app import create_app
from repairdesk.lib.jwt import create_access_token
from repairdesk.services.container import build_services


@pytest.fixture
def client(services):
    app = create_app(services=services)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def unconfigured_client():
    app = create_app(services=build_services(None))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    token = create_access_token("admin-1", "owner@satisfied.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers():
    token = create_access_token("user-john", "john.smith@email.com")
    return {"Authorization": f"Bearer {token}"}
