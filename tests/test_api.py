"""Tests for the reference HTTP API."""

import os
import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient

# Set environment variables before importing app
os.environ.setdefault("API_KEY", "test_api_key_12345")

from adyen_connector.api import app, get_connector, _connector_from_env
from adyen_connector.connectors import AdyenConnector, SimulatorTransport


@pytest.fixture
def simulator():
    return SimulatorTransport()


@pytest.fixture
def client(gateway_config, simulator):
    """Create a test client backed by the simulator."""
    app.dependency_overrides[get_connector] = lambda: AdyenConnector(gateway_config, transport=simulator)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Return authenticated headers."""
    return {"Authorization": "Bearer test_api_key_12345"}


CARD = {
    "kind": "card",
    "number": SimulatorTransport.CARD_SUCCESS,
    "month": 3,
    "year": 2030,
    "name": "Jane Doe",
    "verification_value": "737",
}


class TestAPIKeyAuthentication:
    """Tests for API key authentication."""

    def test_invalid_api_key_rejects_request(self, client):
        body = {"amount": 1000, "payment_method": CARD, "options": {"order_id": "1"}}
        response = client.post("/payments/authorize", json=body, headers={"Authorization": "Bearer wrong"})
        assert response.status_code == 401
        assert "Invalid API key" in response.json()["detail"]

    def test_missing_credentials_rejected(self, client):
        body = {"amount": 1000, "payment_method": CARD, "options": {"order_id": "1"}}
        response = client.post("/payments/authorize", json=body)
        assert response.status_code in (401, 403)

    def test_unconfigured_api_key(self, client, auth_headers):
        with patch.dict(os.environ, {"API_KEY": ""}):
            response = client.post("/payments/void", json={"authorization": "A#B#"}, headers=auth_headers)
        assert response.status_code == 500


class TestPaymentEndpoints:
    """Tests for the operation endpoints."""

    def test_authorize(self, client, auth_headers):
        body = {"amount": 1000, "payment_method": CARD, "options": {"order_id": "1"}}
        response = client.post("/payments/authorize", json=body, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Authorised"
        assert data["is_test"] is True
        assert data["error_code"] is None
        assert data["authorization"].count("#") == 2

    def test_authorize_capture_refund_flow(self, client, auth_headers):
        auth = client.post(
            "/payments/authorize",
            json={"amount": 1000, "payment_method": CARD, "options": {"order_id": "1"}},
            headers=auth_headers,
        ).json()
        capture = client.post(
            "/payments/capture",
            json={"amount": 1000, "authorization": auth["authorization"]},
            headers=auth_headers,
        ).json()
        assert capture["success"] is True

        refund = client.post(
            "/payments/refund",
            json={"amount": 1000, "authorization": capture["authorization"]},
            headers=auth_headers,
        ).json()
        assert refund["success"] is True
        assert refund["message"] == "[refund-received]"

    def test_purchase(self, client, auth_headers, simulator):
        body = {"amount": 1000, "payment_method": CARD, "options": {"order_id": "1"}}
        response = client.post("/payments/purchase", json=body, headers=auth_headers)
        assert response.json()["success"] is True
        assert [action for action, _ in simulator.requests] == ["authorise", "capture"]

    def test_void(self, client, auth_headers):
        auth = client.post(
            "/payments/authorize",
            json={"amount": 1000, "payment_method": CARD, "options": {"order_id": "1"}},
            headers=auth_headers,
        ).json()
        response = client.post("/payments/void", json={"authorization": auth["authorization"]}, headers=auth_headers)
        assert response.json()["success"] is True

    def test_store_and_verify(self, client, auth_headers):
        body = {"payment_method": CARD, "options": {"order_id": "1"}}
        stored = client.post("/payments/store", json=body, headers=auth_headers).json()
        assert stored["success"] is True

        verified = client.post("/payments/verify", json=body, headers=auth_headers).json()
        assert verified["success"] is True

    def test_declined_card_is_200_with_failure(self, client, auth_headers):
        card = dict(CARD, number=SimulatorTransport.CARD_INVALID_NUMBER)
        body = {"amount": 1000, "payment_method": card, "options": {"order_id": "1"}}
        response = client.post("/payments/authorize", json=body, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["error_code"] == "incorrect_number"

    def test_missing_order_id_is_422(self, client, auth_headers):
        body = {"amount": 1000, "payment_method": CARD}
        response = client.post("/payments/authorize", json=body, headers=auth_headers)
        assert response.status_code == 422
        assert "order_id" in response.json()["detail"]

    def test_negative_amount_rejected(self, client, auth_headers):
        body = {"amount": -5, "payment_method": CARD, "options": {"order_id": "1"}}
        response = client.post("/payments/authorize", json=body, headers=auth_headers)
        assert response.status_code == 422

    def test_stored_payment_method(self, client, auth_headers):
        body = {"amount": 100, "payment_method": {"kind": "stored", "reference": "1#1#unknown"},
                "options": {"order_id": "1"}}
        response = client.post("/payments/authorize", json=body, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["success"] is False

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["provider"] == "adyen"


class TestConnectorDependency:
    """Tests for building the connector from the environment."""

    def test_unconfigured_gateway_is_500(self, auth_headers):
        _connector_from_env.cache_clear()
        try:
            with patch.dict(os.environ, {"ADYEN_USERNAME": ""}):
                response = TestClient(app).get("/health")
        finally:
            _connector_from_env.cache_clear()
        assert response.status_code == 500
