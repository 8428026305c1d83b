"""Builds the configured key-value store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gbg_feeds.adapters.sinks.in_memory_store import InMemoryKeyValueStore
from gbg_feeds.adapters.sinks.rest_store import RestKeyValueStore

if TYPE_CHECKING:
    from gbg_feeds.adapters.config.app_config import AppConfig
    from gbg_feeds.domain.contracts.http_transport import HttpTransport
    from gbg_feeds.domain.contracts.key_value_store import KeyValueStoreProtocol

logger = logging.getLogger(__name__)


def create_key_value_store(config: AppConfig, transport: HttpTransport) -> KeyValueStoreProtocol:
    """Create the store selected by ``sink_backend``."""
    if config.sink_backend == "rest":
        if not config.sink_url:
            raise ValueError("sink_url must be set when sink_backend is 'rest'")
        logger.info(f"Publishing to REST store at {config.sink_url}")
        return RestKeyValueStore(
            transport,
            config.sink_url,
            auth_token=config.sink_auth_token,
            poll_interval_seconds=config.sink_poll_interval_seconds,
        )

    logger.info("Publishing to in-memory store")
    return InMemoryKeyValueStore()
