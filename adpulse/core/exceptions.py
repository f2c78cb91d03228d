# ==============================================================================
# Analytics Exceptions
# ==============================================================================
"""
Exception hierarchy for the analytics pipeline.

Fatal errors (EventBuildError, AnalyticsInitializationError) propagate to the
caller. Transient errors (TransportError, ResponseDecodeError,
ClientClosedError) are caught where delivery happens and only logged.
"""


class AnalyticsError(Exception):
    """Base class for all analytics pipeline errors."""


class EventBuildError(AnalyticsError, ValueError):
    """An event was built without its required fields."""


class AnalyticsInitializationError(AnalyticsError, RuntimeError):
    """The analytics manager could not be initialized."""


class TransportError(AnalyticsError):
    """An HTTP request failed or returned an unusable body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseDecodeError(AnalyticsError):
    """The collector response did not match the expected schema."""


class ClientClosedError(AnalyticsError):
    """The delivery client was used after shutdown."""
