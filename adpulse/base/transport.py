# ==============================================================================
# Transport Abstract Base Class
# ==============================================================================
"""
Abstract interface for the request/response plumbing used by the delivery
client.

Calls are synchronous; the delivery client only invokes them from background
tasks so callers on the tracking path never block on network I/O.
"""

from abc import ABC, abstractmethod
from typing import Any


class Transport(ABC):
    """Generic JSON request/response transport."""

    @abstractmethod
    def request(
        self,
        method: str,
        endpoint: str,
        query_params: dict[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        """
        Issue one request and return the parsed JSON response body.

        Args:
            method: HTTP method ("GET", "POST", ...)
            endpoint: Path relative to the transport's base URL
            query_params: Query string parameters
            body: JSON-serializable request body

        Returns:
            Parsed JSON body ({} for an empty body)

        Raises:
            TransportError: On connection failure, timeout, non-2xx status
                or a body that is not JSON
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release connections held by the transport."""
        ...
