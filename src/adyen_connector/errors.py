"""Exceptions raised by the connector."""

from typing import Optional


class PreconditionError(ValueError):
    """A caller-contract violation detected before any network call."""


class TransportError(Exception):
    """A failed round-trip to the remote payment API.

    Carries whatever response body the remote server attached so the caller
    can still normalize it into an outcome.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[bytes] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body or b""
