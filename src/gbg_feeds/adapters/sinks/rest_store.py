"""Key-value store adapter for a Firebase-style REST database.

Every path maps to ``<base_url>/<path>.json``. PUT replaces, PATCH updates
children, POST appends under a generated key and DELETE removes. The
optional auth token is sent as the ``auth`` query parameter.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Any

from aiohttp import ClientError

from gbg_feeds.domain.contracts.http_transport import HttpTransport
from gbg_feeds.domain.contracts.key_value_store import KeyValueStoreProtocol, ValueCallback
from gbg_feeds.domain.errors import MalformedResponseError, SinkError, SinkWriteError
from gbg_feeds.domain.models.http import HttpResponse, RequestSpec

logger = logging.getLogger(__name__)

_UNSET = object()


class RestKeyValueStore(KeyValueStoreProtocol):
    """Publishes records over the database's REST interface.

    Subscriptions poll the subscribed path and report a value only when it
    differs from the previously delivered one.
    """

    def __init__(
        self,
        transport: HttpTransport,
        base_url: str,
        auth_token: str | None = None,
        poll_interval_seconds: float = 5.0,
    ) -> None:
        """Initialize the store.

        Args:
            transport: Transport used for all requests (not throttled).
            base_url: Database URL, e.g. ``https://example.firebaseio.com``.
            auth_token: Optional database secret or ID token.
            poll_interval_seconds: How often subscriptions re-read their path.
        """
        self._transport = transport
        self.base_url = base_url.rstrip("/")
        self._auth_token = auth_token
        self.poll_interval_seconds = poll_interval_seconds
        self._watchers: set[asyncio.Task] = set()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.strip('/')}.json"

    def _params(self) -> dict[str, str]:
        return {"auth": self._auth_token} if self._auth_token else {}

    async def _send(self, method: str, path: str, body: Any = None) -> HttpResponse:
        spec = RequestSpec(method=method, url=self._url(path), params=self._params(), json=body)
        error_type = SinkError if method == "GET" else SinkWriteError
        try:
            response = await self._transport.request(spec)
        except (ClientError, TimeoutError) as e:
            raise error_type(f"{method} {path} failed: {e}") from e
        if not response.ok:
            raise error_type(
                f"{method} {path} returned status {response.status}: {response.text()[:200]}"
            )
        return response

    async def get(self, path: str) -> Any:
        """Read the value at ``path``."""
        response = await self._send("GET", path)
        try:
            return response.json()
        except MalformedResponseError as e:
            raise SinkError(f"GET {path} returned invalid JSON") from e

    async def set(self, path: str, value: Any) -> None:
        """Replace the value at ``path``; None deletes it."""
        if value is None:
            await self._send("DELETE", path)
        else:
            await self._send("PUT", path, value)

    async def update(self, path: str, values: dict[str, Any]) -> None:
        """Replace the given children of ``path``."""
        await self._send("PATCH", path, values)

    async def push(self, path: str, value: Any) -> str:
        """Append ``value`` under a server-generated key."""
        response = await self._send("POST", path, value)
        try:
            return str(response.json()["name"])
        except (MalformedResponseError, KeyError, TypeError) as e:
            raise SinkWriteError(f"POST {path} did not return the new key") from e

    async def subscribe(self, path: str, callback: ValueCallback) -> Callable[[], None]:
        """Poll ``path`` and call ``callback`` with every changed value.

        The first value is read before this method returns.
        """
        last_value: Any = _UNSET

        async def poll_once() -> None:
            nonlocal last_value
            value = await self.get(path)
            if value != last_value:
                last_value = value
                callback(value)

        await poll_once()

        async def watch() -> None:
            while True:
                await asyncio.sleep(self.poll_interval_seconds)
                try:
                    await poll_once()
                except SinkError as e:
                    logger.warning(f"Could not refresh subscription to '{path}': {e}")
                except Exception as e:
                    logger.error(f"Subscriber to '{path}' failed: {e}", exc_info=True)

        task = asyncio.create_task(watch(), name=f"subscription:{path}")
        self._watchers.add(task)
        task.add_done_callback(self._watchers.discard)

        def unsubscribe() -> None:
            task.cancel()

        return unsubscribe

    async def close(self) -> None:
        """Cancel all subscription watchers."""
        for task in list(self._watchers):
            task.cancel()
        for task in list(self._watchers):
            with contextlib.suppress(asyncio.CancelledError):
                await task
