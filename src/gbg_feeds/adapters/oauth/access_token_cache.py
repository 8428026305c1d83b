"""OAuth2 client-credentials token provider with expiry-aware caching."""

from __future__ import annotations

import asyncio
import base64
import logging
import time
from collections.abc import Callable

from aiohttp import ClientError

from gbg_feeds.domain.contracts.access_token_provider import AccessTokenProvider
from gbg_feeds.domain.contracts.http_transport import HttpTransport
from gbg_feeds.domain.errors import AuthError, MalformedResponseError
from gbg_feeds.domain.models.access_token import AccessToken
from gbg_feeds.domain.models.http import RequestSpec

logger = logging.getLogger(__name__)


class AccessTokenCache(AccessTokenProvider):
    """Fetches bearer tokens with the client-credentials grant and caches them.

    A cached token is returned without a network call until it expires. A
    failed refresh leaves the previous cache entry untouched. Concurrent
    callers during a refresh wait for the one request in flight instead of
    sending their own.
    """

    def __init__(
        self,
        token_url: str,
        consumer_key: str,
        consumer_secret: str,
        transport: HttpTransport,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache. No token is fetched until first use.

        Args:
            token_url: URL to POST to for a new access token.
            consumer_key: OAuth2 client id.
            consumer_secret: OAuth2 client secret.
            transport: Transport used for the token request.
            clock: Clock returning seconds.
        """
        self.token_url = token_url
        self._basic_auth = base64.b64encode(f"{consumer_key}:{consumer_secret}".encode()).decode(
            "ascii"
        )
        self._transport = transport
        self._clock = clock
        self._cached: AccessToken | None = None
        self._lock = asyncio.Lock()

    @property
    def cached_token(self) -> AccessToken | None:
        """The current cache entry, valid or not."""
        return self._cached

    def _valid_token(self) -> str | None:
        cached = self._cached
        if cached is not None and cached.is_valid(self._clock()):
            return cached.token
        return None

    async def get_access_token(self) -> str:
        """Return a valid access token, fetching a new one if the cached one expired.

        Raises:
            AuthError: If the token endpoint could not be reached or refused the request.
        """
        token = self._valid_token()
        if token is not None:
            return token

        async with self._lock:
            # Another caller may have refreshed while we waited for the lock
            token = self._valid_token()
            if token is not None:
                return token

            self._cached = await self._request_token()
            return self._cached.token

    async def _request_token(self) -> AccessToken:
        """POST the client-credentials grant and build a cache entry from the response."""
        spec = RequestSpec(
            method="POST",
            url=self.token_url,
            headers={
                "Authorization": f"Basic {self._basic_auth}",
                "Content-Type": "application/x-www-form-urlencoded",
            },
            data={"grant_type": "client_credentials"},
        )

        requested_at = self._clock()
        try:
            response = await self._transport.request(spec)
        except (ClientError, TimeoutError) as e:
            raise AuthError(f"Could not reach token endpoint {self.token_url}: {e}") from e

        if not response.ok:
            raise AuthError(
                f"Token endpoint {self.token_url} returned status {response.status}: "
                f"{response.text()[:200]}"
            )

        try:
            data = response.json()
            access_token = str(data["access_token"])
            expires_in = int(data["expires_in"])
        except (MalformedResponseError, KeyError, TypeError, ValueError) as e:
            raise AuthError(f"Unexpected token response from {self.token_url}: {e}") from e

        if not access_token:
            raise AuthError(f"Token endpoint {self.token_url} returned an empty access token")

        logger.info(f"Fetched new access token from {self.token_url}, expires in {expires_in}s")
        return AccessToken(token=access_token, expires_at=requested_at + expires_in)
