"""Tests for the throttled requester."""

from unittest.mock import MagicMock, patch

import aiohttp
import pytest

from conftest import AlwaysAdmit, FakeClock, FakeTransport, NeverAdmit, json_response
from gbg_feeds.adapters.throttling import ThrottledRequester, TokenBucketThrottle
from gbg_feeds.domain.errors import ThrottledError
from gbg_feeds.domain.models.http import RequestSpec

SPEC = RequestSpec(method="GET", url="https://api.example.com/things", params={"id": "1"})


class TestThrottledRequester:
    """Tests for ThrottledRequester."""

    @pytest.mark.asyncio
    async def test_when_admitted_then_delegates_to_transport(self) -> None:
        """Given an admitting throttle, when performing a request, then the transport response is returned."""
        transport = FakeTransport(json_response({"ok": True}))
        requester = ThrottledRequester(AlwaysAdmit(), transport, name="test")

        response = await requester.perform_request(SPEC)

        assert response.json() == {"ok": True}
        assert transport.requests == [SPEC]

    @pytest.mark.asyncio
    async def test_when_denied_then_raises_without_network_call(self) -> None:
        """Given a denying throttle, when performing a request, then ThrottledError and no request."""
        transport = FakeTransport()
        requester = ThrottledRequester(NeverAdmit(), transport, name="test")

        with pytest.raises(ThrottledError):
            await requester.perform_request(SPEC)

        assert transport.call_count == 0

    @pytest.mark.asyncio
    async def test_when_transport_fails_then_error_propagates_unchanged(self) -> None:
        """Given a transport error, when performing a request, then the same exception is raised."""
        error = aiohttp.ClientConnectionError("connection reset")
        requester = ThrottledRequester(AlwaysAdmit(), FakeTransport(error), name="test")

        with pytest.raises(aiohttp.ClientConnectionError) as exc_info:
            await requester.perform_request(SPEC)

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_when_bucket_runs_dry_then_later_requests_are_throttled(self) -> None:
        """Given capacity 2, when sending 3 requests, then the third is throttled and not sent."""
        transport = FakeTransport()
        transport.handler = lambda spec: json_response({})
        throttle = TokenBucketThrottle("test", 2, 60_000, clock=FakeClock())
        requester = ThrottledRequester(throttle, transport)

        await requester.perform_request(SPEC)
        await requester.perform_request(SPEC)
        with pytest.raises(ThrottledError):
            await requester.perform_request(SPEC)

        assert transport.call_count == 2

    def test_admit_asks_the_throttle(self) -> None:
        """Given a throttle, when calling admit on the requester, then the throttle is consulted."""
        throttle = AlwaysAdmit()
        requester = ThrottledRequester(throttle, FakeTransport())

        assert requester.admit() is True
        assert throttle.calls == 1

    @pytest.mark.asyncio
    @patch("gbg_feeds.adapters.throttling.throttled_requester.log_api_request")
    async def test_when_url_has_redacted_form_then_logs_it(self, mock_log: MagicMock) -> None:
        """Given a URL carrying a key, when performing a request, then only the redacted URL is logged."""
        spec = RequestSpec(
            method="GET",
            url="https://api.example.com/CameraImage/secret-key/17",
            redacted_url="https://api.example.com/CameraImage/.../17",
        )
        transport = FakeTransport(json_response({}))
        requester = ThrottledRequester(AlwaysAdmit(), transport, name="test")

        await requester.perform_request(spec)

        assert mock_log.call_args[0][1] == "https://api.example.com/CameraImage/.../17"
        assert transport.requests[0].url == "https://api.example.com/CameraImage/secret-key/17"

    @pytest.mark.asyncio
    async def test_when_denied_then_error_uses_redacted_url(self) -> None:
        """Given a denying throttle and a URL carrying a key, when performing, then the error hides the key."""
        spec = RequestSpec(
            method="GET", url="https://api.example.com/secret-key", redacted_url="https://api.example.com/..."
        )
        requester = ThrottledRequester(NeverAdmit(), FakeTransport(), name="test")

        with pytest.raises(ThrottledError) as exc_info:
            await requester.perform_request(spec)

        assert "secret-key" not in str(exc_info.value)
