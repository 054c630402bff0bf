"""Tests for HTTP push token registration."""

import json

import httpx
import pytest

from voip_bridge.services.registration import HttpTokenSink
from voip_bridge.utils.exceptions import TokenForwardError

REGISTRATION_URL = "https://calls.example.com/api/devices/voip-token"


def make_sink(handler) -> HttpTokenSink:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpTokenSink(REGISTRATION_URL, client=client)


class TestHttpTokenSink:
    """Tests for HttpTokenSink class."""

    def test_posts_token(self):
        """Should POST the token as JSON."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"ok": True})

        make_sink(handler).report_push_token("deadbeef")

        assert len(requests) == 1
        assert requests[0].method == "POST"
        assert str(requests[0].url) == REGISTRATION_URL
        assert json.loads(requests[0].content) == {"voipToken": "deadbeef", "platform": "ios"}

    def test_empty_token_sent_on_invalidation(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(204)

        make_sink(handler).report_push_token("")

        assert bodies == [{"voipToken": "", "platform": "ios"}]

    def test_rejected_status(self):
        """Should raise on a non-2xx response."""
        sink = make_sink(lambda request: httpx.Response(503))

        with pytest.raises(TokenForwardError) as exc_info:
            sink.report_push_token("deadbeef")

        assert exc_info.value.details["status_code"] == 503

    def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TokenForwardError):
            make_sink(handler).report_push_token("deadbeef")

    def test_timeout(self):
        """Should raise a timeout as TokenForwardError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(TokenForwardError) as exc_info:
            make_sink(handler).report_push_token("deadbeef")

        assert "timed out" in exc_info.value.message
