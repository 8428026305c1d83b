"""Watched stops and the store subscription that keeps them current."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from gbg_feeds.domain.models.stop_to_fetch import StopToFetch

if TYPE_CHECKING:
    from gbg_feeds.domain.contracts.key_value_store import KeyValueStoreProtocol

logger = logging.getLogger(__name__)

STOPS_TO_FETCH_PATH = "vasttrafik/stopsToFetch"


class ActiveStopsRegistry:
    """Holds the current list of watched stops.

    The list is replaced as a whole on every snapshot, so a poll that read
    it before an update keeps iterating its own copy.
    """

    def __init__(self, stops: list[StopToFetch] | None = None) -> None:
        self._stops: tuple[StopToFetch, ...] = tuple(stops or ())

    @property
    def stops(self) -> tuple[StopToFetch, ...]:
        """All watched stops, active or not."""
        return self._stops

    @property
    def active_stops(self) -> tuple[StopToFetch, ...]:
        """Stops that should be polled."""
        return tuple(stop for stop in self._stops if stop.active)

    def replace(self, stops: list[StopToFetch]) -> None:
        """Swap in a new list of stops in one assignment."""
        self._stops = tuple(stops)

    def apply_snapshot(self, snapshot: Any) -> None:
        """Replace the stops with the entries of a ``stopsToFetch`` snapshot.

        Args:
            snapshot: Map of key to ``{id, active, timeSpan}``, or None when
                nothing is stored.
        """
        if not isinstance(snapshot, dict):
            if snapshot is not None:
                logger.warning(f"Ignoring stops snapshot of type {type(snapshot).__name__}")
            self.replace([])
            return

        stops = []
        for key, raw in snapshot.items():
            stop = StopToFetch.from_snapshot_entry(key, raw)
            if stop is None:
                logger.warning(f"Ignoring stop entry '{key}' without an id")
                continue
            stops.append(stop)
        self.replace(stops)
        logger.info(f"Watching {len(self.active_stops)} active stop(s) of {len(stops)}")


class StopSubscription:
    """Keeps an ActiveStopsRegistry in sync with the store."""

    def __init__(
        self,
        store: KeyValueStoreProtocol,
        registry: ActiveStopsRegistry,
        path: str = STOPS_TO_FETCH_PATH,
    ) -> None:
        """Initialize the subscription.

        Args:
            store: Store holding the watched stops.
            registry: Registry updated with every snapshot.
            path: Path of the ``stopsToFetch`` map.
        """
        self.store = store
        self.registry = registry
        self.path = path
        self._unsubscribe: Callable[[], None] | None = None

    async def seed(self, stops: list[StopToFetch]) -> None:
        """Write configured stops that are not in the store yet."""
        if not stops:
            return
        existing = await self.store.get(self.path)
        existing = existing if isinstance(existing, dict) else {}
        missing = {stop.key: stop.to_snapshot_entry() for stop in stops if stop.key not in existing}
        if missing:
            await self.store.update(self.path, missing)
            logger.info(f"Seeded {len(missing)} stop(s) into '{self.path}'")

    async def start(self) -> None:
        """Subscribe to the stops path; the registry is filled before this returns."""
        if self._unsubscribe is not None:
            logger.warning("Stop subscription already running")
            return
        self._unsubscribe = await self.store.subscribe(self.path, self.registry.apply_snapshot)

    async def stop(self) -> None:
        """Unsubscribe from the stops path. Safe to call when not started."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
