"""Protocol for bearer token providers."""

from typing import Protocol


class AccessTokenProvider(Protocol):
    """Provides a currently valid bearer token."""

    async def get_access_token(self) -> str:
        """Return a valid access token, refreshing it if needed.

        Raises:
            AuthError: If a new token could not be obtained.
        """
        ...
