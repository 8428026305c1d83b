"""Image store writing snapshots to the local filesystem."""

import asyncio
import logging
from pathlib import Path

from gbg_feeds.domain.contracts.image_store import ImageStoreProtocol

logger = logging.getLogger(__name__)


class LocalImageStore(ImageStoreProtocol):
    """Stores images below a root directory, creating folders as needed."""

    def __init__(self, root: Path) -> None:
        """Initialize with the directory images are written under."""
        self.root = root

    def _write(self, path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    async def save(self, key: str, content: bytes) -> str:
        """Write ``content`` to ``<root>/<key>`` and return the file path."""
        path = self.root / key.strip("/")
        if self.root.resolve() not in path.resolve().parents:
            raise ValueError(f"Image key escapes the image directory: {key}")
        await asyncio.to_thread(self._write, path, content)
        logger.debug(f"Saved {len(content)} bytes to {path}")
        return str(path)
