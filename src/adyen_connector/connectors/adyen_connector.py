import base64
import json
import logging
from typing import Any, Dict, Optional

from ..config import GatewayConfig
from ..errors import TransportError
from ..scrubbing import scrub
from . import request_builder as rb
from .base import ConnectorBase
from .models import CanonicalOutcome, OperationOptions, OptionsLike, coerce_payment_method
from .normalizer import ActionKind, normalize, parse
from .transport import RequestsTransport, TransportBase

logger = logging.getLogger(__name__)

TEST_URL = "https://pal-test.adyen.com/pal/servlet/Payment/v18"
LIVE_URL = "https://pal-live.adyen.com/pal/servlet/Payment/v18"
SUBDOMAIN_LIVE_URL = "https://{subdomain}-pal-live.adyenpayments.com/pal/servlet/Payment/v18"


class AdyenConnector(ConnectorBase):
    """
    Connector for the Adyen card-processing API (JSON over HTTPS).

    Every primitive builds its own request document, sends it through the
    transport and normalizes the reply. Remote declines, transport faults
    and malformed bodies all come back as a failed CanonicalOutcome; only
    caller-contract violations raise (PreconditionError).
    """

    def __init__(self, config: GatewayConfig, transport: Optional[TransportBase] = None):
        if not isinstance(config, GatewayConfig):
            raise ValueError("AdyenConnector requires a GatewayConfig")
        self.config = config
        self.transport = transport or RequestsTransport(timeout=config.timeout)

    @property
    def url(self) -> str:
        if self.config.test:
            return TEST_URL
        if self.config.subdomain:
            return SUBDOMAIN_LIVE_URL.format(subdomain=self.config.subdomain)
        return LIVE_URL

    def authorize(self, money: int, payment_method: Any, options: OptionsLike = None) -> CanonicalOutcome:
        options = OperationOptions.coerce(options)
        rb.requires_order_id(options)
        payment_method = coerce_payment_method(payment_method)
        post = rb.init_post(options, self.config.merchant_account)
        rb.add_invoice(post, money, options, self.config.default_currency)
        rb.add_payment(post, payment_method)
        rb.add_extra_data(post, options)
        rb.add_shopper_interaction(post, payment_method, options)
        rb.add_address(post, options)
        return self._commit(ActionKind.AUTHORISE, post)

    def capture(self, money: int, authorization: str, options: OptionsLike = None) -> CanonicalOutcome:
        options = OperationOptions.coerce(options)
        post = rb.init_post(options, self.config.merchant_account)
        rb.add_invoice_for_modification(post, money, options, self.config.default_currency)
        rb.add_reference(post, authorization)
        return self._commit(ActionKind.CAPTURE, post)

    def refund(self, money: int, authorization: str, options: OptionsLike = None) -> CanonicalOutcome:
        options = OperationOptions.coerce(options)
        post = rb.init_post(options, self.config.merchant_account)
        rb.add_invoice_for_modification(post, money, options, self.config.default_currency)
        rb.add_original_reference(post, authorization)
        return self._commit(ActionKind.REFUND, post)

    def void(self, authorization: str, options: OptionsLike = None) -> CanonicalOutcome:
        options = OperationOptions.coerce(options)
        post = rb.init_post(options, self.config.merchant_account)
        rb.add_reference(post, authorization)
        return self._commit(ActionKind.CANCEL, post)

    def store(self, payment_method: Any, options: OptionsLike = None) -> CanonicalOutcome:
        options = OperationOptions.coerce(options)
        rb.requires_order_id(options)
        payment_method = coerce_payment_method(payment_method)
        post = rb.init_post(options, self.config.merchant_account)
        rb.add_invoice(post, 0, options, self.config.default_currency)
        rb.add_payment(post, payment_method)
        rb.add_extra_data(post, options)
        rb.add_recurring_contract(post)
        rb.add_address(post, options)
        return self._commit(ActionKind.AUTHORISE, post)

    def supports_scrubbing(self) -> bool:
        return True

    def scrub(self, transcript: str) -> str:
        return scrub(transcript)

    def health_check(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "provider": "adyen",
            "test": self.config.test,
            "url": self.url,
        }

    def _headers(self) -> Dict[str, str]:
        credentials = f"{self.config.username}:{self.config.password}".encode("utf-8")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Basic {base64.b64encode(credentials).decode('ascii')}",
        }

    def _commit(self, action: ActionKind, post: Dict[str, Any]) -> CanonicalOutcome:
        transport_error: Optional[TransportError] = None
        try:
            raw_response = self.transport.send(
                "POST", f"{self.url}/{action.value}", json.dumps(post), self._headers()
            )
        except TransportError as e:
            transport_error = e
            raw_response = e.body

        outcome = normalize(action, post, parse(raw_response), is_test=self.config.test)
        if transport_error is not None and not outcome.message:
            outcome = outcome.model_copy(update={"message": str(transport_error)})

        logger.info(
            f"{action.value} {'succeeded' if outcome.success else 'failed'}"
            f" for merchant {post['merchantAccount']}: {outcome.message}"
        )
        return outcome
