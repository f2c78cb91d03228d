# ==============================================================================
# Tests for RequestsTransport
# ==============================================================================
"""
Tests for the requests-backed JSON transport.

The underlying requests.Session is replaced with a MagicMock so no network
traffic happens.
"""

from unittest.mock import MagicMock

import pytest
import requests

from adpulse.core.exceptions import TransportError
from adpulse.infrastructure.http import RequestsTransport

BASE_URL = "https://collector.example/api/"


def _response(status_code=200, text='{"success": true}', json_value=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.reason = "Reason"
    if json_value is None:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = json_value
    return response


@pytest.fixture()
def session():
    return MagicMock(spec=requests.Session, headers={})


@pytest.fixture()
def transport(session):
    return RequestsTransport(BASE_URL, connect_timeout=5, read_timeout=10, session=session)


class TestRequest:
    """Tests for RequestsTransport.request()."""

    def test_post_sends_json_body(self, transport, session):
        """POST bodies are sent as JSON to base URL + endpoint."""
        session.request.return_value = _response(json_value={"success": True})

        result = transport.request("POST", "statistics.php", body={"event_type": "AD_CLICKED"})

        assert result == {"success": True}
        session.request.assert_called_once_with(
            "POST",
            BASE_URL + "statistics.php",
            params=None,
            json={"event_type": "AD_CLICKED"},
            timeout=(5, 10),
        )

    def test_get_sends_query_params_without_body(self, transport, session):
        session.request.return_value = _response(json_value={"ok": 1})

        transport.request("get", "status.php", query_params={"id": "1"}, body={"ignored": True})

        _, kwargs = session.request.call_args
        assert kwargs["params"] == {"id": "1"}
        assert kwargs["json"] is None

    def test_json_headers_are_set(self, session):
        RequestsTransport(BASE_URL, session=session)
        assert session.headers["Content-Type"] == "application/json"
        assert session.headers["Accept"] == "application/json"

    def test_non_2xx_raises_with_status(self, transport, session):
        """Error statuses become TransportError carrying the code and body."""
        session.request.return_value = _response(status_code=500, text="boom")

        with pytest.raises(TransportError, match="HTTP 500: boom") as excinfo:
            transport.request("POST", "statistics.php", body={})

        assert excinfo.value.status_code == 500

    def test_blank_body_is_empty_object(self, transport, session):
        session.request.return_value = _response(status_code=204, text="  ")
        assert transport.request("POST", "statistics.php", body={}) == {}

    def test_non_json_body_raises(self, transport, session):
        session.request.return_value = _response(text="<html>")

        with pytest.raises(TransportError, match="not JSON"):
            transport.request("POST", "statistics.php", body={})

    def test_connection_error_raises(self, transport, session):
        """requests exceptions are wrapped in TransportError."""
        session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(TransportError) as excinfo:
            transport.request("POST", "statistics.php", body={})

        assert excinfo.value.status_code is None
        assert isinstance(excinfo.value.__cause__, requests.exceptions.ConnectionError)


class TestLifecycle:
    def test_close_closes_session(self, transport, session):
        transport.close()
        session.close.assert_called_once()

    def test_build_url(self, transport):
        assert transport.build_url("statistics.php") == BASE_URL + "statistics.php"
