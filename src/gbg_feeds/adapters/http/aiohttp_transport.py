"""HTTP transport backed by an aiohttp client session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gbg_feeds.domain.contracts.http_transport import HttpTransport
from gbg_feeds.domain.models.http import HttpResponse, RequestSpec

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)


class AiohttpTransport(HttpTransport):
    """Sends requests through a shared aiohttp session.

    Responses are read completely and returned for every status code;
    interpreting the status is left to the caller. Connection errors and
    timeouts propagate as aiohttp raises them.
    """

    def __init__(self, session: ClientSession) -> None:
        """Initialize with the aiohttp session owned by the application."""
        self._session = session

    async def request(self, spec: RequestSpec) -> HttpResponse:
        """Send one request and read the whole response body."""
        async with self._session.request(
            spec.method,
            spec.url,
            params=spec.params or None,
            headers=spec.headers or None,
            data=spec.data,
            json=spec.json,
        ) as response:
            body = await response.read()
            logger.debug(f"{spec.method} {spec.display_url} -> {response.status} ({len(body)} bytes)")
            return HttpResponse(
                status=response.status,
                headers={k.lower(): v for k, v in response.headers.items()},
                body=body,
                url=spec.display_url,
            )
