# ==============================================================================
# Tests for AnalyticsApiClient
# ==============================================================================
"""
Tests for best-effort, fire-and-forget event delivery.

A recording Transport stands in for HTTP; each test inspects what was POSTed
and how responses and failures are handled.
"""

import threading

import pytest

from adpulse.base.transport import Transport
from adpulse.core.exceptions import ClientClosedError, TransportError
from adpulse.core.models import AnalyticsEvent, EventType
from adpulse.infrastructure.delivery import AnalyticsApiClient

OK_RESPONSE = {
    "success": True,
    "message": "Event logged",
    "logged_at": "2024-01-01 00:00:00",
    "event_type": "AD_CLICKED",
    "session_id": "abc",
}


class FakeTransport(Transport):
    """Transport that records requests and replays a canned result."""

    def __init__(self, result=OK_RESPONSE, error=None):
        self.result = result
        self.error = error
        self.requests = []
        self.closed = False
        self._lock = threading.Lock()

    def request(self, method, endpoint, query_params=None, body=None):
        with self._lock:
            self.requests.append((method, endpoint, body))
        if self.error is not None:
            raise self.error
        return self.result

    def close(self):
        self.closed = True


def _event(event_type=EventType.AD_CLICKED) -> AnalyticsEvent:
    return AnalyticsEvent(
        event_type=event_type, ad_unit_id="unit1", timestamp=1, session_id="abc"
    )


class TestSendEvent:
    """Tests for the asynchronous send path."""

    def test_posts_serialized_event(self):
        """send_event() POSTs the wire form of the event to the endpoint."""
        transport = FakeTransport()
        client = AnalyticsApiClient(transport, endpoint="statistics.php")

        response = client.send_event(_event()).result(timeout=5)
        client.shutdown()

        assert transport.requests == [("POST", "statistics.php", _event().to_dict())]
        assert response.success is True
        assert response.session_id == "abc"

    def test_transport_failure_resolves_to_none(self):
        """Delivery errors are swallowed; the future resolves to None."""
        transport = FakeTransport(error=TransportError("HTTP 500: boom", 500))
        client = AnalyticsApiClient(transport)

        assert client.send_event(_event()).result(timeout=5) is None
        client.shutdown()

    def test_undecodable_response_resolves_to_none(self):
        transport = FakeTransport(result=["unexpected"])
        client = AnalyticsApiClient(transport)

        assert client.send_event(_event()).result(timeout=5) is None
        client.shutdown()

    def test_no_retry_after_failure(self):
        """Each event is attempted exactly once."""
        transport = FakeTransport(error=TransportError("down"))
        client = AnalyticsApiClient(transport)

        client.send_event(_event()).result(timeout=5)
        client.shutdown()

        assert len(transport.requests) == 1

    def test_send_after_shutdown_is_dropped(self):
        transport = FakeTransport()
        client = AnalyticsApiClient(transport)
        client.shutdown()

        assert client.send_event(_event()) is None
        assert transport.requests == []


class TestDeliver:
    """Tests for synchronous delivery."""

    def test_returns_response(self):
        client = AnalyticsApiClient(FakeTransport())
        response = client.deliver(_event())
        client.shutdown()

        assert response.message == "Event logged"

    def test_returns_none_on_failure(self):
        client = AnalyticsApiClient(FakeTransport(error=TransportError("down")))
        assert client.deliver(_event()) is None
        client.shutdown()

    def test_raises_after_shutdown(self):
        client = AnalyticsApiClient(FakeTransport())
        client.shutdown()

        with pytest.raises(ClientClosedError):
            client.deliver(_event())


class TestShutdown:
    """Tests for shutdown()."""

    def test_waits_for_pending_sends(self):
        """shutdown(wait=True) lets queued events finish, then closes the transport."""
        transport = FakeTransport()
        client = AnalyticsApiClient(transport, max_workers=2)
        for _ in range(20):
            client.send_event(_event(EventType.AD_IMPRESSION))

        client.shutdown(wait=True)

        assert len(transport.requests) == 20
        assert transport.closed
        assert client.closed

    def test_is_idempotent(self):
        transport = FakeTransport()
        client = AnalyticsApiClient(transport)
        client.shutdown()
        client.shutdown()
        assert transport.closed
