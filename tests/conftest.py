"""Shared test fixtures and configuration."""

import os
import pytest
from unittest.mock import MagicMock
from typing import Dict, Any

# Set up test environment variables before importing modules
os.environ.setdefault("API_KEY", "test_api_key_12345")
os.environ.setdefault("ADYEN_USERNAME", "ws@Company.Test")
os.environ.setdefault("ADYEN_PASSWORD", "test_password")
os.environ.setdefault("ADYEN_MERCHANT_ACCOUNT", "TestMerchant")

from adyen_connector.config import GatewayConfig
from adyen_connector.connectors import (
    AdyenConnector,
    CardDetails,
    StoredCredentialReference,
    SimulatorTransport,
)
from adyen_connector.connectors.transport import TransportBase


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Return a test-mode gateway configuration."""
    return GatewayConfig(
        username="ws@Company.Test",
        password="test_password",
        merchant_account="TestMerchant",
    )


@pytest.fixture
def mock_transport():
    """Create a mock transport returning an empty JSON object."""
    transport = MagicMock(spec=TransportBase)
    transport.send.return_value = b"{}"
    return transport


@pytest.fixture
def connector(gateway_config, mock_transport) -> AdyenConnector:
    """Create an AdyenConnector wired to the mock transport."""
    return AdyenConnector(gateway_config, transport=mock_transport)


@pytest.fixture
def simulator() -> SimulatorTransport:
    return SimulatorTransport()


@pytest.fixture
def simulated_connector(gateway_config, simulator) -> AdyenConnector:
    """Create an AdyenConnector wired to the in-memory simulator."""
    return AdyenConnector(gateway_config, transport=simulator)


@pytest.fixture
def credit_card() -> CardDetails:
    """Return a card with a verification value."""
    return CardDetails(
        number="4111111111111111",
        month=8,
        year=2030,
        name="Jane Doe",
        verification_value="737",
    )


@pytest.fixture
def card_without_cvc() -> CardDetails:
    return CardDetails(number="4111111111111111", month=8, year=2030, name="Jane Doe")


@pytest.fixture
def stored_credential() -> StoredCredentialReference:
    return StoredCredentialReference(reference="8835511210681145#8835511210681145#8315517007512431")


@pytest.fixture
def options() -> Dict[str, Any]:
    """Return valid operation options."""
    return {
        "order_id": "order_456",
        "shopper_email": "jane@example.com",
        "shopper_ip": "77.110.174.153",
        "shopper_reference": "shopper_789",
        "billing_address": {
            "address1": "Simon Carmiggeltstraat 6",
            "address2": "50",
            "zip": "1011 DJ",
            "city": "Amsterdam",
            "state": "NH",
            "country": "NL",
        },
    }


@pytest.fixture
def authorised_body() -> bytes:
    return b'{"pspReference":"8835511210681145","resultCode":"Authorised"}'


@pytest.fixture
def refused_body() -> bytes:
    return (
        b'{"pspReference":"8835511210689999","resultCode":"Refused",'
        b'"refusalReason":"Refused","additionalData":{"refusalReasonRaw":"DECLINED Not approved"}}'
    )
