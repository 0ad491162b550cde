"""Gateway configuration."""

import os
import logging
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "USD"
DEFAULT_TIMEOUT = 60.0

_TRUTHY = ("1", "true", "yes", "on")


class GatewayConfig(BaseModel):
    """Immutable merchant configuration shared by every operation."""
    username: str = Field(..., min_length=1, description="Web service user")
    password: str = Field(..., min_length=1, description="Web service password")
    merchant_account: str = Field(..., min_length=1, description="Default merchant account")
    test: bool = Field(default=True, description="Send requests to the test endpoint")
    subdomain: Optional[str] = Field(default=None, description="Merchant-specific live endpoint prefix")
    default_currency: str = Field(default=DEFAULT_CURRENCY, min_length=3, max_length=3)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")

    class Config:
        frozen = True

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Build a configuration from ADYEN_* environment variables.

        Raises:
            ValueError: If a required variable is missing.
        """
        required = {
            "username": "ADYEN_USERNAME",
            "password": "ADYEN_PASSWORD",
            "merchant_account": "ADYEN_MERCHANT_ACCOUNT",
        }
        values = {}
        for field_name, env_name in required.items():
            value = os.getenv(env_name)
            if not value:
                raise ValueError(f"{env_name} environment variable is not configured")
            values[field_name] = value

        values["test"] = os.getenv("ADYEN_TEST_MODE", "true").lower() in _TRUTHY
        subdomain = os.getenv("ADYEN_SUBDOMAIN")
        if subdomain:
            values["subdomain"] = subdomain
        timeout = os.getenv("ADYEN_TIMEOUT")
        if timeout:
            values["timeout"] = float(timeout)

        config = cls(**values)
        logger.info(
            f"Loaded gateway config for merchant {config.merchant_account} "
            f"(test={config.test})"
        )
        return config
