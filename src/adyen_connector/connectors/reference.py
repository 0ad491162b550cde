"""Encoding of the composite authorization token.

A token threads remote identifiers between dependent calls. It joins up to
three fields in fixed order::

    <original reference>#<psp reference>#<recurring detail reference>

A token without the delimiter is a bare psp reference and decodes to itself
whichever field is asked for.
"""

from typing import Optional

DELIMITER = "#"

_ORIGINAL, _PSP, _RECURRING = range(3)


def encode(
    original_reference: Optional[str],
    psp_reference: Optional[str],
    recurring_reference: Optional[str] = None,
) -> str:
    """Build a token, or return ``""`` when the remote yielded no psp reference."""
    if not psp_reference:
        return ""
    return DELIMITER.join([original_reference or "", psp_reference, recurring_reference or ""])


def is_bare(token: Optional[str]) -> bool:
    return bool(token) and DELIMITER not in token


def _field(token: Optional[str], position: int) -> str:
    if not token:
        return ""
    if is_bare(token):
        return token
    parts = token.split(DELIMITER)
    return parts[position] if position < len(parts) else ""


def decode_for_reference(token: Optional[str]) -> str:
    """Psp reference of the transaction, for capture and void."""
    return _field(token, _PSP)


def decode_for_original_reference(token: Optional[str]) -> str:
    """Reference of the original payment, for refund."""
    return _field(token, _ORIGINAL)


def decode_for_recurring_reference(token: Optional[str]) -> str:
    """Recurring detail reference, for payments with a stored credential."""
    return _field(token, _RECURRING)
