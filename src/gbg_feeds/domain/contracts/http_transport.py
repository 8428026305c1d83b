"""Protocol for sending HTTP requests."""

from typing import Protocol

from gbg_feeds.domain.models.http import HttpResponse, RequestSpec


class HttpTransport(Protocol):
    """Sends one request and returns the fully read response for any status."""

    async def request(self, spec: RequestSpec) -> HttpResponse:
        """Send the request. Network failures propagate as the transport's own errors."""
        ...
