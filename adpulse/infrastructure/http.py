# ==============================================================================
# HTTP Transport (requests)
# ==============================================================================
"""
JSON-over-HTTP implementation of the Transport interface.

Uses a requests.Session so connections are pooled across background sends.
Every failure mode (connection error, timeout, non-2xx status, body that is
not JSON) surfaces as a TransportError.
"""

import logging
from typing import Any

import requests

from adpulse.base.transport import Transport
from adpulse.core.exceptions import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0  # seconds

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class RequestsTransport(Transport):
    """Transport bound to a base URL, e.g. ``https://mahimeta.com/api/``."""

    def __init__(
        self,
        base_url: str,
        connect_timeout: float = DEFAULT_TIMEOUT,
        read_timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self._base_url = base_url
        self._timeout = (connect_timeout, read_timeout)
        self._session = session or requests.Session()
        self._session.headers.update(JSON_HEADERS)

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_url(self, endpoint: str) -> str:
        """Join the base URL and an endpoint path."""
        return f"{self._base_url}{endpoint}"

    def request(
        self,
        method: str,
        endpoint: str,
        query_params: dict[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        url = self.build_url(endpoint)
        send_body = body is not None and method.upper() in ("POST", "PUT", "PATCH")

        try:
            response = self._session.request(
                method.upper(),
                url,
                params=query_params or None,
                json=body if send_body else None,
                timeout=self._timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method.upper()} {url} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            error = response.text or response.reason or "Unknown error"
            raise TransportError(f"HTTP {response.status_code}: {error}", response.status_code)

        # 204 No Content and blank bodies decode to an empty object
        if not response.text.strip():
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Response from {url} is not JSON", response.status_code
            ) from e

    def close(self) -> None:
        self._session.close()
