"""In-memory stand-in for the remote payment API.

SimulatorTransport plugs into AdyenConnector in place of the HTTP transport
and answers authorise/capture/refund/cancel requests the way the remote API
does, so payment flows can be exercised without network access.
"""

import json
import time
import uuid
import random
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ..errors import TransportError
from .transport import TransportBase

logger = logging.getLogger(__name__)


class SimulatorScenario(str, Enum):
    """Predefined outcomes for an authorisation."""
    SUCCESS = "success"
    DECLINE = "decline"
    INVALID_NUMBER = "invalid_number"
    INVALID_CVC = "invalid_cvc"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"


@dataclass
class SimulatedTransaction:
    """In-memory representation of an authorised payment."""
    psp_reference: str
    amount: int
    currency: str
    status: str
    created_at: datetime = field(default_factory=datetime.utcnow)
    captured_amount: int = 0
    refunded_amount: int = 0
    recurring_detail_reference: Optional[str] = None


@dataclass
class SimulatorConfig:
    """Configuration for simulator behavior."""
    delay_ms: int = 0  # Simulated response delay in ms
    timeout_rate: float = 0.0  # Rate of timeout errors
    seed: Optional[int] = None  # Random seed for reproducibility


class SimulatorTransport(TransportBase):
    """
    Fake remote API. Card numbers select the authorisation scenario:

    - CARD_DECLINE: refused by the issuer
    - CARD_INVALID_NUMBER: rejected with HTTP 422, errorCode 101
    - CARD_INVALID_CVC: rejected with HTTP 422, errorCode 103
    - CARD_TIMEOUT: no response at all
    - CARD_SERVER_ERROR: HTTP 500 with an HTML error page

    Any other number is authorised.
    """

    CARD_SUCCESS = "4111111111111111"
    CARD_DECLINE = "4000300011112220"
    CARD_INVALID_NUMBER = "4000000000000002"
    CARD_INVALID_CVC = "4000000000000101"
    CARD_TIMEOUT = "4000000000000119"
    CARD_SERVER_ERROR = "4000000000000127"

    def __init__(self, config: Optional[SimulatorConfig] = None):
        self.config = config or SimulatorConfig()
        self._transactions: Dict[str, SimulatedTransaction] = {}
        self._recurring_details: Dict[str, str] = {}
        self._rng = random.Random(self.config.seed)
        self.requests: list = []
        logger.info("SimulatorTransport initialized")

    def _generate_reference(self) -> str:
        return str(uuid.uuid4().int)[:16]

    def _apply_delay(self) -> None:
        if self.config.delay_ms > 0:
            time.sleep(self.config.delay_ms / 1000.0)

    def _determine_scenario(self, card: Dict[str, Any]) -> SimulatorScenario:
        card_scenarios = {
            self.CARD_DECLINE: SimulatorScenario.DECLINE,
            self.CARD_INVALID_NUMBER: SimulatorScenario.INVALID_NUMBER,
            self.CARD_INVALID_CVC: SimulatorScenario.INVALID_CVC,
            self.CARD_TIMEOUT: SimulatorScenario.TIMEOUT,
            self.CARD_SERVER_ERROR: SimulatorScenario.SERVER_ERROR,
        }
        number = card.get("number", "")
        if number in card_scenarios:
            return card_scenarios[number]
        if self._rng.random() < self.config.timeout_rate:
            return SimulatorScenario.TIMEOUT
        return SimulatorScenario.SUCCESS

    def send(self, method: str, url: str, body: str, headers: Dict[str, str]) -> bytes:
        self._apply_delay()
        action = url.rstrip("/").rsplit("/", 1)[-1]
        payload = json.loads(body)
        self.requests.append((action, payload))

        handlers = {
            "authorise": self._authorise,
            "capture": self._capture,
            "refund": self._refund,
            "cancel": self._cancel,
        }
        handler = handlers.get(action)
        if handler is None:
            raise TransportError("Failed with 404 Not Found", status_code=404, body=b"")
        return json.dumps(handler(payload)).encode("utf-8")

    @staticmethod
    def _validation_error(error_code: str, message: str) -> TransportError:
        body = {"status": 422, "errorCode": error_code, "message": message, "errorType": "validation"}
        return TransportError(
            "Failed with 422 Unprocessable Entity",
            status_code=422,
            body=json.dumps(body).encode("utf-8"),
        )

    def _authorise(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        amount = payload.get("amount", {})
        recurring_detail = payload.get("selectedRecurringDetailReference")
        if recurring_detail is not None:
            if recurring_detail not in self._recurring_details:
                return {
                    "pspReference": self._generate_reference(),
                    "resultCode": "Refused",
                    "refusalReason": "Refused",
                    "additionalData": {"refusalReasonRaw": "Unknown recurring detail reference"},
                }
            scenario = SimulatorScenario.SUCCESS
        else:
            scenario = self._determine_scenario(payload.get("card", {}))

        if scenario == SimulatorScenario.TIMEOUT:
            raise TransportError("Request timed out: simulated timeout")
        if scenario == SimulatorScenario.SERVER_ERROR:
            raise TransportError(
                "Failed with 500 Internal Server Error",
                status_code=500,
                body=b"<html><body>Internal Server Error</body></html>",
            )
        if scenario == SimulatorScenario.INVALID_NUMBER:
            raise self._validation_error("101", "Invalid card number")
        if scenario == SimulatorScenario.INVALID_CVC:
            raise self._validation_error("103", "CVC is not the right length")

        psp_reference = self._generate_reference()
        if scenario == SimulatorScenario.DECLINE:
            return {
                "pspReference": psp_reference,
                "resultCode": "Refused",
                "refusalReason": "Refused",
                "additionalData": {"refusalReasonRaw": "DECLINED Not approved"},
            }

        txn = SimulatedTransaction(
            psp_reference=psp_reference,
            amount=amount.get("value", 0),
            currency=amount.get("currency", ""),
            status="authorised",
        )
        response: Dict[str, Any] = {"pspReference": psp_reference, "resultCode": "Authorised"}
        if payload.get("recurring", {}).get("contract") == "RECURRING" and recurring_detail is None:
            txn.recurring_detail_reference = self._generate_reference()
            self._recurring_details[txn.recurring_detail_reference] = psp_reference
            response["additionalData"] = {
                "recurring.recurringDetailReference": txn.recurring_detail_reference,
            }
        self._transactions[psp_reference] = txn
        return response

    def _lookup(self, payload: Dict[str, Any]) -> SimulatedTransaction:
        txn = self._transactions.get(payload.get("originalReference", ""))
        if not txn:
            raise self._validation_error("167", "Original pspReference required for this operation")
        return txn

    def _modification_received(self, action: str) -> Dict[str, Any]:
        return {"pspReference": self._generate_reference(), "response": f"[{action}-received]"}

    def _capture(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        txn = self._lookup(payload)
        if txn.status != "authorised":
            raise self._validation_error("167", f"Cannot capture a {txn.status} payment")
        txn.captured_amount = payload.get("modificationAmount", {}).get("value", 0)
        txn.status = "captured"
        return self._modification_received("capture")

    def _refund(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        txn = self._lookup(payload)
        if txn.status not in ("captured", "partially_refunded"):
            raise self._validation_error("167", f"Cannot refund a {txn.status} payment")
        txn.refunded_amount += payload.get("modificationAmount", {}).get("value", 0)
        txn.status = "refunded" if txn.refunded_amount >= txn.captured_amount else "partially_refunded"
        return self._modification_received("refund")

    def _cancel(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        txn = self._lookup(payload)
        if txn.status != "authorised":
            raise self._validation_error("167", f"Cannot cancel a {txn.status} payment")
        txn.status = "cancelled"
        return self._modification_received("cancel")

    def get_transaction(self, psp_reference: str) -> Optional[SimulatedTransaction]:
        """Get a transaction from in-memory storage (for testing)."""
        return self._transactions.get(psp_reference)

    def clear_transactions(self) -> None:
        """Clear all stored transactions (for test cleanup)."""
        self._transactions.clear()
        self._recurring_details.clear()
        self.requests.clear()
