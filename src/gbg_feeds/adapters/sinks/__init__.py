"""Key-value store adapters."""

from gbg_feeds.adapters.sinks.factory import create_key_value_store
from gbg_feeds.adapters.sinks.in_memory_store import InMemoryKeyValueStore
from gbg_feeds.adapters.sinks.rest_store import RestKeyValueStore

__all__ = ["InMemoryKeyValueStore", "RestKeyValueStore", "create_key_value_store"]
