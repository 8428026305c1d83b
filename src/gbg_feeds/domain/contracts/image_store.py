"""Protocol for storing downloaded images."""

from typing import Protocol


class ImageStoreProtocol(Protocol):
    """Stores binary image content under a key."""

    async def save(self, key: str, content: bytes) -> str:
        """Store ``content`` and return a location that can be published."""
        ...
