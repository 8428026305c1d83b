"""Protocols for request admission control."""

from typing import Protocol

from gbg_feeds.domain.models.http import HttpResponse, RequestSpec


class Throttle(Protocol):
    """Decides per request whether it may be sent now."""

    def admit(self) -> bool:
        """Consume capacity for one request.

        Returns:
            True if the request may be sent, False if it must be dropped.
        """
        ...


class ThrottledClient(Throttle, Protocol):
    """An HTTP client whose requests pass through a throttle first."""

    async def perform_request(self, spec: RequestSpec) -> HttpResponse:
        """Send the request if admitted.

        Raises:
            ThrottledError: If the throttle denied the request.
        """
        ...
