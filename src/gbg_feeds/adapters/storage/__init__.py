"""Storage adapters."""

from gbg_feeds.adapters.storage.local_image_store import LocalImageStore

__all__ = ["LocalImageStore"]
