"""Field-adders that build the request document for one remote call.

Each function takes the request dict ("post") and fills in one group of
fields. A missing required value raises PreconditionError so nothing
malformed reaches the network.
"""

from typing import Any, Dict, Optional, Union

from ..errors import PreconditionError
from . import reference
from .models import Address, CardDetails, OperationOptions, StoredCredentialReference

NOT_AVAILABLE = "N/A"
RECURRING_CONTRACT = "RECURRING"

Post = Dict[str, Any]


def requires_order_id(options: OperationOptions) -> None:
    if not options.order_id:
        raise PreconditionError("Missing required option: order_id")


def init_post(options: OperationOptions, merchant_account: str) -> Post:
    post: Post = {"merchantAccount": options.merchant_account or merchant_account}
    if options.order_id:
        post["reference"] = options.order_id
    return post


def _amount(money: Any, options: OperationOptions, default_currency: str) -> Dict[str, Any]:
    if isinstance(money, bool) or not isinstance(money, int):
        raise PreconditionError(f"Amount must be an integer in minor units, got {money!r}")
    if money < 0:
        raise PreconditionError(f"Amount must not be negative, got {money}")
    return {"value": money, "currency": options.currency or default_currency}


def add_invoice(post: Post, money: int, options: OperationOptions, default_currency: str) -> None:
    post["amount"] = _amount(money, options, default_currency)


def add_invoice_for_modification(post: Post, money: int, options: OperationOptions, default_currency: str) -> None:
    post["modificationAmount"] = _amount(money, options, default_currency)


def add_payment(post: Post, payment_method: Union[CardDetails, StoredCredentialReference]) -> None:
    if isinstance(payment_method, StoredCredentialReference):
        recurring_detail = reference.decode_for_recurring_reference(payment_method.reference)
        if not recurring_detail:
            raise PreconditionError("Stored credential reference has no recurring detail reference")
        post["selectedRecurringDetailReference"] = recurring_detail
        add_recurring_contract(post)
    else:
        add_card(post, payment_method)


def add_card(post: Post, card: CardDetails) -> None:
    fields = {
        "expiryMonth": card.month,
        "expiryYear": card.year,
        "holderName": card.name,
        "number": card.number,
        "cvc": card.verification_value,
    }
    fields = {k: v for k, v in fields.items() if v is not None and not _blank(v)}
    missing = [k for k in ("expiryMonth", "expiryYear", "holderName", "number") if k not in fields]
    if missing:
        raise PreconditionError(f"Missing required card fields: {', '.join(missing)}")
    post["card"] = fields


def _blank(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


def add_extra_data(post: Post, options: OperationOptions) -> None:
    extra = {
        "shopperEmail": options.shopper_email,
        "shopperIP": options.shopper_ip,
        "shopperReference": options.shopper_reference,
        "selectedBrand": options.selected_brand,
        "deliveryDate": options.delivery_date,
        "merchantOrderReference": options.merchant_order_reference,
    }
    post.update({k: v for k, v in extra.items() if v})
    if options.fraud_offset is not None:
        post["fraudOffset"] = options.fraud_offset


def add_shopper_interaction(
    post: Post,
    payment_method: Union[CardDetails, StoredCredentialReference],
    options: OperationOptions,
) -> None:
    if isinstance(payment_method, CardDetails) and payment_method.verification_value:
        interaction = "Ecommerce"
    else:
        interaction = "ContAuth"
    post["shopperInteraction"] = options.shopper_interaction or interaction


def add_address(post: Post, options: OperationOptions) -> None:
    card = post.get("card")
    if not isinstance(card, dict):
        return
    address: Optional[Address] = options.billing_address or options.address
    if not address or not address.country:
        return

    billing = {
        "street": address.address1 or NOT_AVAILABLE,
        "houseNumberOrName": address.address2 or NOT_AVAILABLE,
        "city": address.city or NOT_AVAILABLE,
        "country": address.country,
    }
    if address.zip:
        billing["postalCode"] = address.zip
    if address.state:
        billing["stateOrProvince"] = address.state
    card["billingAddress"] = billing


def add_reference(post: Post, authorization: str) -> None:
    """Point a capture or void at the authorised transaction."""
    psp_reference = reference.decode_for_reference(authorization)
    if not psp_reference:
        raise PreconditionError("Authorization carries no psp reference")
    post["originalReference"] = psp_reference


def add_original_reference(post: Post, authorization: str) -> None:
    """Point a refund at the original payment."""
    original_reference = reference.decode_for_original_reference(authorization)
    if not original_reference:
        raise PreconditionError("Authorization carries no original reference")
    post["originalReference"] = original_reference


def add_recurring_contract(post: Post) -> None:
    post["recurring"] = {"contract": RECURRING_CONTRACT}
