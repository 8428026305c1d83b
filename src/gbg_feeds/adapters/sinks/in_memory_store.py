"""In-memory hierarchical key-value store."""

from __future__ import annotations

import copy
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from gbg_feeds.adapters.sinks.paths import paths_overlap, split_path
from gbg_feeds.domain.contracts.key_value_store import KeyValueStoreProtocol, ValueCallback

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass(eq=False)
class _Subscription:
    segments: list[str]
    callback: ValueCallback
    last_value: Any = field(default=_UNSET)


class InMemoryKeyValueStore(KeyValueStoreProtocol):
    """A JSON tree held in memory, with value-changed subscriptions.

    Values are copied on the way in and out, so callers never share mutable
    state with the store. Branches left empty by a delete are pruned.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        """Initialize the store, optionally with existing data."""
        self._root: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._subscriptions: list[_Subscription] = []

    def _read(self, segments: list[str]) -> Any:
        node: Any = self._root
        for segment in segments:
            if not isinstance(node, dict) or segment not in node:
                return None
            node = node[segment]
        return node if node != {} else None

    def _write(self, segments: list[str], value: Any) -> None:
        if value == {}:
            value = None
        if not segments:
            self._root = copy.deepcopy(value) if isinstance(value, dict) else {}
            return

        parents: list[dict[str, Any]] = []
        node = self._root
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                if value is None:
                    return
                child = node[segment] = {}
            parents.append(node)
            node = child

        if value is None:
            node.pop(segments[-1], None)
            # Prune branches left empty by the delete
            for parent, segment in zip(reversed(parents), reversed(segments[:-1]), strict=True):
                if parent.get(segment) == {}:
                    del parent[segment]
        else:
            node[segments[-1]] = copy.deepcopy(value)

    def _notify(self, changed: list[str]) -> None:
        for subscription in list(self._subscriptions):
            if not paths_overlap(subscription.segments, changed):
                continue
            self._deliver(subscription)

    def _deliver(self, subscription: _Subscription) -> None:
        value = self._read(subscription.segments)
        if value == subscription.last_value:
            return
        subscription.last_value = copy.deepcopy(value)
        try:
            subscription.callback(copy.deepcopy(value))
        except Exception as e:
            logger.error(
                f"Subscriber to '{'/'.join(subscription.segments)}' failed: {e}", exc_info=True
            )

    async def get(self, path: str) -> Any:
        """Read a copy of the value at ``path``."""
        return copy.deepcopy(self._read(split_path(path)))

    async def set(self, path: str, value: Any) -> None:
        """Replace the value at ``path``; None deletes it."""
        segments = split_path(path)
        self._write(segments, value)
        self._notify(segments)

    async def update(self, path: str, values: dict[str, Any]) -> None:
        """Replace the given children of ``path``; keys may themselves be paths."""
        base = split_path(path)
        for key, value in values.items():
            self._write(base + split_path(key), value)
        self._notify(base)

    async def push(self, path: str, value: Any) -> str:
        """Store ``value`` under a new unique child of ``path``."""
        key = uuid.uuid4().hex
        await self.set(f"{path}/{key}", value)
        return key

    async def subscribe(self, path: str, callback: ValueCallback) -> Callable[[], None]:
        """Deliver the current value now and every changed value afterwards."""
        subscription = _Subscription(segments=split_path(path), callback=callback)
        self._subscriptions.append(subscription)
        self._deliver(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe
