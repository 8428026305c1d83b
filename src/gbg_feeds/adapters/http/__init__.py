"""HTTP transport adapters."""

from gbg_feeds.adapters.http.aiohttp_transport import AiohttpTransport

__all__ = ["AiohttpTransport"]
