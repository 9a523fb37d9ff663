"""API test fixtures - the assembled app on a temp-directory store."""

import pytest
from starlette.testclient import TestClient


@pytest.fixture
def config(tmp_path):
    from core.config import StudioConfig
    return StudioConfig(storage_dir=str(tmp_path / "api-store"))


@pytest.fixture
def app(config, store):
    """Full studio app: middleware, error handlers, data/actions routes."""
    from api.app import create_app
    return create_app(config=config, store=store)


@pytest.fixture
def services(app):
    return app.state.services


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def act(client):
    """POST an action and return the response."""
    def _act(domain: str, action: str, data: dict):
        return client.post("/api/actions", json={"domain": domain, "action": action, "data": data})
    return _act


@pytest.fixture
def api_customer(act):
    response = act("customer", "create", {"name": "Deepa Nair", "phone": "+91-9876500000"})
    return response.json()["data"]


@pytest.fixture
def api_event(act, api_customer):
    response = act("event", "create", {
        "customerId": api_customer["id"],
        "eventType": "Wedding",
        "eventDate": "2030-02-14",
        "totalAmount": 10000,
        "advancePaid": 2000,
    })
    return response.json()["data"]
