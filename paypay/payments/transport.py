"""
HTTP transport for the PayPay gateway.

Anything with a ``send(url, body) -> dict`` method can stand in for
RequestsTransport; the client never talks to ``requests`` directly.
"""

import threading
from typing import Any, Protocol

import requests
import structlog

from paypay.core.logging import BusinessEvents
from paypay.errors import TransportError

log = structlog.get_logger(__name__)


class Transport(Protocol):
    def send(self, url: str, body: dict[str, Any]) -> dict[str, Any]:
        ...


class RequestsTransport:
    """POSTs the JSON envelope; non-2xx, timeouts and bad JSON raise TransportError.

    Each thread gets its own requests.Session. A session passed in explicitly
    is used by every thread as-is, so the caller owns its thread safety.
    """

    HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}

    def __init__(self, timeout: float = 30.0, session: requests.Session | None = None):
        self.timeout = timeout
        self._shared_session = session
        if session is not None:
            session.headers.update(self.HEADERS)
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self.HEADERS)
            self._local.session = session
        return session

    def send(self, url: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            r = self.session.post(url, json=body, timeout=self.timeout)
        except requests.Timeout as e:
            log.error(BusinessEvents.TRANSPORT_ERROR, url=url, error="timeout")
            raise TransportError(f"PayPay gateway timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            log.error(BusinessEvents.TRANSPORT_ERROR, url=url, error=str(e))
            raise TransportError(f"Could not reach PayPay gateway: {e}") from e

        if not 200 <= r.status_code < 300:
            log.error(
                BusinessEvents.TRANSPORT_ERROR, url=url, status_code=r.status_code
            )
            raise TransportError(
                f"HTTP error! status: {r.status_code}",
                status_code=r.status_code,
                body=r.text,
            )

        try:
            return r.json()
        except ValueError as e:
            raise TransportError(
                "PayPay gateway returned a non-JSON body",
                status_code=r.status_code,
                body=r.text,
            ) from e
