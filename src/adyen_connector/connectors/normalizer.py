"""Normalization of remote responses into canonical outcomes."""

import json
import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from . import reference
from .models import CanonicalOutcome, StandardErrorCode

logger = logging.getLogger(__name__)


class ActionKind(str, Enum):
    """Remote actions; each one decides how its response is read."""
    AUTHORISE = "authorise"
    CAPTURE = "capture"
    REFUND = "refund"
    CANCEL = "cancel"


# Result codes that mean an authorisation went through. Anything else,
# including codes added to the remote API later, is a failure.
AUTHORISED_RESULT_CODES = frozenset(["Authorised", "Received", "RedirectShopper"])

ERROR_CODE_MAPPING: Dict[str, StandardErrorCode] = {
    "101": StandardErrorCode.INCORRECT_NUMBER,
    "103": StandardErrorCode.INVALID_CVC,
    "131": StandardErrorCode.INCORRECT_ADDRESS,
    "132": StandardErrorCode.INCORRECT_ADDRESS,
    "133": StandardErrorCode.INCORRECT_ADDRESS,
    "134": StandardErrorCode.INCORRECT_ADDRESS,
    "135": StandardErrorCode.INCORRECT_ADDRESS,
}

RECURRING_DETAIL_KEY = "recurring.recurringDetailReference"
REFUSAL_REASON_RAW_KEY = "refusalReasonRaw"

RawResponse = Union[Mapping[str, Any], bytes, str, None]


def parse(body: Union[bytes, str, None]) -> Dict[str, Any]:
    """Decode a response body; anything that is not a JSON object yields ``{}``."""
    if body is None:
        return {}
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not body.strip():
        return {}
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        logger.warning(f"Unparseable response body ({len(body)} chars)")
        return {}
    if not isinstance(parsed, dict):
        logger.warning(f"Response body is a JSON {type(parsed).__name__}, not an object")
        return {}
    return parsed


def _additional_data(response: Mapping[str, Any]) -> Mapping[str, Any]:
    data = response.get("additionalData")
    return data if isinstance(data, Mapping) else {}


def _text(mapping: Mapping[str, Any], key: str) -> Optional[str]:
    """Non-empty string at ``key``; values of any other type count as absent."""
    value = mapping.get(key)
    return value if isinstance(value, str) and value else None


def success_from(action: ActionKind, response: Mapping[str, Any]) -> bool:
    if action == ActionKind.AUTHORISE:
        return _text(response, "resultCode") in AUTHORISED_RESULT_CODES
    received = f"{action.value}-received"
    # The live API brackets the status, e.g. "[capture-received]"
    return _text(response, "response") in (received, f"[{received}]")


def message_from(action: ActionKind, response: Mapping[str, Any]) -> Optional[str]:
    if action == ActionKind.AUTHORISE:
        return authorize_message_from(response)
    return _text(response, "response") or _text(response, "message")


def authorize_message_from(response: Mapping[str, Any]) -> Optional[str]:
    refusal_reason = _text(response, "refusalReason")
    refusal_reason_raw = _text(_additional_data(response), REFUSAL_REASON_RAW_KEY)
    if refusal_reason and refusal_reason_raw:
        return f"{refusal_reason} | {refusal_reason_raw}"
    return refusal_reason or _text(response, "resultCode") or _text(response, "message")


def authorization_from(request_fields: Mapping[str, Any], response: Mapping[str, Any]) -> str:
    """Token for the transaction this response describes, or ``""``.

    The original reference is carried over from the request when it already
    names one; otherwise this response establishes it.
    """
    psp_reference = _text(response, "pspReference")
    if not psp_reference:
        return ""
    original_reference = _text(request_fields, "originalReference") or psp_reference
    recurring = _text(_additional_data(response), RECURRING_DETAIL_KEY)
    return reference.encode(original_reference, psp_reference, recurring)


def error_code_from(response: Mapping[str, Any]) -> Optional[StandardErrorCode]:
    return ERROR_CODE_MAPPING.get(str(response.get("errorCode")))


def normalize(
    action: Union[ActionKind, str],
    request_fields: Optional[Mapping[str, Any]],
    raw_response: RawResponse,
    is_test: bool = False,
) -> CanonicalOutcome:
    """Map a remote response for ``action`` onto a CanonicalOutcome.

    Args:
        action: The remote action that produced the response.
        request_fields: The request document that was sent.
        raw_response: Parsed response map, or the raw body to parse.
        is_test: Whether the call went to the test endpoint.

    Returns:
        The canonical outcome. Never raises for malformed responses.
    """
    action = ActionKind(action)
    response = raw_response if isinstance(raw_response, Mapping) else parse(raw_response)
    request_fields = request_fields or {}

    success = success_from(action, response)
    authorization = authorization_from(request_fields, response)
    if success and not authorization:
        logger.warning(f"{action.value} succeeded without a pspReference")

    return CanonicalOutcome(
        success=success,
        message=message_from(action, response),
        raw_provider_response=dict(response),
        authorization=authorization,
        error_code=None if success else error_code_from(response),
        is_test=is_test,
    )
