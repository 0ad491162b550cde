"""Reference HTTP API exposing the connector operations."""

import os
import secrets
import logging
from functools import lru_cache
from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException, Request, Security
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .config import GatewayConfig
from .connectors import AdyenConnector, ConnectorBase, OperationOptions, PaymentMethod
from .errors import PreconditionError

logger = logging.getLogger(__name__)

RATE_LIMIT = os.getenv("RATE_LIMIT", "100/minute")

security = HTTPBearer()
limiter = Limiter(key_func=get_remote_address)

app = FastAPI(title="Adyen Connector - Reference API")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


class PaymentBody(BaseModel):
    amount: int = Field(..., ge=0, description="Amount in minor units")
    payment_method: PaymentMethod
    options: OperationOptions = Field(default_factory=OperationOptions)


class ModificationBody(BaseModel):
    amount: int = Field(..., ge=0, description="Amount in minor units")
    authorization: str = Field(..., min_length=1)
    options: OperationOptions = Field(default_factory=OperationOptions)


class VoidBody(BaseModel):
    authorization: str = Field(..., min_length=1)
    options: OperationOptions = Field(default_factory=OperationOptions)


class CredentialBody(BaseModel):
    payment_method: PaymentMethod
    options: OperationOptions = Field(default_factory=OperationOptions)


async def verify_api_key(credentials: HTTPAuthorizationCredentials = Security(security)) -> str:
    """Verify the API key from the Authorization header.

    Raises:
        HTTPException: If API key is invalid or not configured.
    """
    expected_key = os.getenv("API_KEY")
    if not expected_key:
        logger.error("API_KEY environment variable is not configured")
        raise HTTPException(status_code=500, detail="Server configuration error")
    if not secrets.compare_digest(credentials.credentials, expected_key):
        raise HTTPException(status_code=401, detail="Invalid API key")
    return credentials.credentials


@lru_cache(maxsize=1)
def _connector_from_env() -> AdyenConnector:
    return AdyenConnector(GatewayConfig.from_env())


def get_connector() -> ConnectorBase:
    try:
        return _connector_from_env()
    except ValueError as e:
        logger.error(f"Gateway is not configured: {e}")
        raise HTTPException(status_code=500, detail="Server configuration error") from e


@app.exception_handler(PreconditionError)
async def precondition_error_handler(request: Request, exc: PreconditionError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def _render(outcome) -> Dict[str, Any]:
    return outcome.model_dump(mode="json")


@app.post("/payments/authorize")
@limiter.limit(RATE_LIMIT)
def authorize(request: Request, body: PaymentBody, _: str = Depends(verify_api_key),
              connector: ConnectorBase = Depends(get_connector)):
    return _render(connector.authorize(body.amount, body.payment_method, body.options))


@app.post("/payments/purchase")
@limiter.limit(RATE_LIMIT)
def purchase(request: Request, body: PaymentBody, _: str = Depends(verify_api_key),
             connector: ConnectorBase = Depends(get_connector)):
    return _render(connector.purchase(body.amount, body.payment_method, body.options))


@app.post("/payments/capture")
@limiter.limit(RATE_LIMIT)
def capture(request: Request, body: ModificationBody, _: str = Depends(verify_api_key),
            connector: ConnectorBase = Depends(get_connector)):
    return _render(connector.capture(body.amount, body.authorization, body.options))


@app.post("/payments/refund")
@limiter.limit(RATE_LIMIT)
def refund(request: Request, body: ModificationBody, _: str = Depends(verify_api_key),
           connector: ConnectorBase = Depends(get_connector)):
    return _render(connector.refund(body.amount, body.authorization, body.options))


@app.post("/payments/void")
@limiter.limit(RATE_LIMIT)
def void(request: Request, body: VoidBody, _: str = Depends(verify_api_key),
         connector: ConnectorBase = Depends(get_connector)):
    return _render(connector.void(body.authorization, body.options))


@app.post("/payments/store")
@limiter.limit(RATE_LIMIT)
def store(request: Request, body: CredentialBody, _: str = Depends(verify_api_key),
          connector: ConnectorBase = Depends(get_connector)):
    return _render(connector.store(body.payment_method, body.options))


@app.post("/payments/verify")
@limiter.limit(RATE_LIMIT)
def verify(request: Request, body: CredentialBody, _: str = Depends(verify_api_key),
           connector: ConnectorBase = Depends(get_connector)):
    return _render(connector.verify(body.payment_method, body.options))


@app.get("/health")
def health(connector: ConnectorBase = Depends(get_connector)):
    return connector.health_check()
