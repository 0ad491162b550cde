"""HTTP transport for the remote payment API."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests

from ..config import DEFAULT_TIMEOUT
from ..errors import TransportError
from ..scrubbing import scrub

logger = logging.getLogger(__name__)


class TransportBase(ABC):
    """Performs one network round-trip and returns the raw response body."""

    @abstractmethod
    def send(self, method: str, url: str, body: str, headers: Dict[str, str]) -> bytes:
        """
        Send a request. Raises TransportError carrying any response body the
        server attached when the call fails.
        """
        raise NotImplementedError


def transcript_of(method: str, url: str, headers: Dict[str, str], body: str) -> str:
    lines = [f"{method} {url}"]
    lines.extend(f"{name}: {value}" for name, value in headers.items())
    lines.append("")
    lines.append(body or "")
    return "\n".join(lines)


class RequestsTransport(TransportBase):
    """Blocking transport built on ``requests``."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self._session = session

    def _request(self, method: str, url: str, body: str, headers: Dict[str, str]) -> requests.Response:
        if self._session is not None:
            return self._session.request(method, url, data=body, headers=headers, timeout=self.timeout)
        return requests.request(method, url, data=body, headers=headers, timeout=self.timeout)

    def send(self, method: str, url: str, body: str, headers: Dict[str, str]) -> bytes:
        logger.debug(scrub(transcript_of(method, url, headers, body)))
        try:
            response = self._request(method, url, body, headers)
        except requests.Timeout as e:
            logger.error(f"Request to {url} timed out after {self.timeout}s")
            raise TransportError(f"Request timed out: {e}") from e
        except requests.RequestException as e:
            logger.error(f"Request to {url} failed: {type(e).__name__}")
            raise TransportError(f"Connection failed: {e}") from e

        content = response.content or b""
        logger.debug(
            scrub(f"<- {response.status_code}\n{content.decode('utf-8', errors='replace')}")
        )
        if response.status_code >= 400:
            raise TransportError(
                f"Failed with {response.status_code} {response.reason}",
                status_code=response.status_code,
                body=content,
            )
        return content
