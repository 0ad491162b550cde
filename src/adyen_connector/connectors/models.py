"""Canonical models shared by connectors."""

from enum import Enum
from typing import Optional, Dict, Any, Union, Literal, Annotated

from pydantic import BaseModel, Field, TypeAdapter


class StandardErrorCode(str, Enum):
    """Canonical error kinds a declined or rejected operation can carry."""
    INCORRECT_NUMBER = "incorrect_number"
    INVALID_NUMBER = "invalid_number"
    INVALID_EXPIRY_DATE = "invalid_expiry_date"
    INVALID_CVC = "invalid_cvc"
    EXPIRED_CARD = "expired_card"
    INCORRECT_CVC = "incorrect_cvc"
    INCORRECT_ZIP = "incorrect_zip"
    INCORRECT_ADDRESS = "incorrect_address"
    INCORRECT_PIN = "incorrect_pin"
    CARD_DECLINED = "card_declined"
    PROCESSING_ERROR = "processing_error"
    CALL_ISSUER = "call_issuer"
    PICKUP_CARD = "pickup_card"
    CONFIG_ERROR = "config_error"
    TEST_MODE_LIVE_CARD = "test_mode_live_card"
    UNSUPPORTED_FEATURE = "unsupported_feature"


class CanonicalOutcome(BaseModel):
    """Normalized result of one primitive call, independent of the remote shape."""
    success: bool
    message: Optional[str] = None
    raw_provider_response: Dict[str, Any] = Field(default_factory=dict)
    authorization: str = ""  # empty when the remote yielded no transaction id
    error_code: Optional[StandardErrorCode] = None
    is_test: bool = False

    class Config:
        frozen = True


class CardDetails(BaseModel):
    kind: Literal["card"] = "card"
    number: str
    month: int = Field(..., ge=1, le=12)
    year: int
    name: str
    verification_value: Optional[str] = None


class StoredCredentialReference(BaseModel):
    """A credential previously stored with the gateway.

    ``reference`` is the authorization returned by ``store`` (or a bare
    recurring detail reference).
    """
    kind: Literal["stored"] = "stored"
    reference: str = Field(..., min_length=1)


PaymentMethod = Annotated[
    Union[CardDetails, StoredCredentialReference],
    Field(discriminator="kind"),
]

_payment_method_adapter = TypeAdapter(PaymentMethod)


def coerce_payment_method(payment_method: Any) -> Union[CardDetails, StoredCredentialReference]:
    """Accept a model, a tagged dict, or a stored reference string."""
    if isinstance(payment_method, (CardDetails, StoredCredentialReference)):
        return payment_method
    if isinstance(payment_method, str):
        return StoredCredentialReference(reference=payment_method)
    return _payment_method_adapter.validate_python(payment_method)


class Address(BaseModel):
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


class OperationOptions(BaseModel):
    """Per-call options. Unrecognized keys are ignored."""
    order_id: Optional[str] = None
    currency: Optional[str] = None
    merchant_account: Optional[str] = None
    shopper_email: Optional[str] = None
    shopper_ip: Optional[str] = None
    shopper_reference: Optional[str] = None
    fraud_offset: Optional[int] = None
    selected_brand: Optional[str] = None
    delivery_date: Optional[str] = None
    merchant_order_reference: Optional[str] = None
    billing_address: Optional[Address] = None
    address: Optional[Address] = None
    shopper_interaction: Optional[str] = None

    @classmethod
    def coerce(cls, options: Union["OperationOptions", Dict[str, Any], None]) -> "OperationOptions":
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.model_validate(options)


OptionsLike = Union[OperationOptions, Dict[str, Any], None]
