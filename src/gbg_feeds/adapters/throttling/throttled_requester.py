"""HTTP requester that drops requests its throttle does not admit."""

import logging

from gbg_feeds.adapters.api_request_logger import log_api_request
from gbg_feeds.domain.contracts.http_transport import HttpTransport
from gbg_feeds.domain.contracts.throttle import Throttle, ThrottledClient
from gbg_feeds.domain.errors import ThrottledError
from gbg_feeds.domain.models.http import HttpResponse, RequestSpec

logger = logging.getLogger(__name__)


class ThrottledRequester(ThrottledClient):
    """Composes a throttle with an HTTP transport.

    Denied requests fail immediately with ThrottledError. Under sustained
    overload some polls are skipped instead of building a backlog.
    """

    def __init__(self, throttle: Throttle, transport: HttpTransport, name: str = "api") -> None:
        """Initialize the requester.

        Args:
            throttle: Admission control for this API.
            transport: Transport that actually sends requests.
            name: Name of the API (for logging).
        """
        self.throttle = throttle
        self.transport = transport
        self.name = name

    def admit(self) -> bool:
        """Ask the throttle for one token."""
        return self.throttle.admit()

    async def perform_request(self, spec: RequestSpec) -> HttpResponse:
        """Send the request if the throttle admits it.

        Raises:
            ThrottledError: If the throttle denied the request.
        """
        if not self.admit():
            raise ThrottledError(f"{self.name}: request to {spec.display_url} was throttled and not sent")

        log_api_request(spec.method, spec.display_url, spec.params, spec.headers, spec.data or spec.json)
        return await self.transport.request(spec)
