"""Publishes departure boards of the watched stops."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from gbg_feeds.application.services.error_reporting import describe_error
from gbg_feeds.domain.errors import SinkError, ThrottledError
from gbg_feeds.domain.text import slugify

if TYPE_CHECKING:
    from gbg_feeds.application.services.active_stops import ActiveStopsRegistry
    from gbg_feeds.domain.contracts.key_value_store import KeyValueStoreProtocol
    from gbg_feeds.domain.models.departure import NormalizedStop
    from gbg_feeds.domain.models.stop_to_fetch import StopToFetch
    from gbg_feeds.domain.ports import DepartureSource

logger = logging.getLogger(__name__)

VASTTRAFIK_ROOT = "vasttrafik"


class DeparturePublisher:
    """Fetches every active stop and writes the normalized boards.

    A board is stored under ``vasttrafik/departures/<slug of stop name>`` and
    ``vasttrafik/stopsLookup/<stop id>`` remembers which slug a stop id was
    written to. An empty board carries no name, so the lookup is used to
    clear the departures of the previously written board.
    """

    def __init__(
        self,
        source: DepartureSource,
        store: KeyValueStoreProtocol,
        registry: ActiveStopsRegistry,
    ) -> None:
        """Initialize the publisher.

        Args:
            source: Departure board client.
            store: Store the boards are written to.
            registry: Registry of watched stops.
        """
        self.source = source
        self.store = store
        self.registry = registry

    async def poll(self) -> None:
        """Fetch and publish all active stops concurrently.

        Each stop is isolated: a failure for one stop is logged and does not
        affect the others.
        """
        stops = self.registry.active_stops
        if not stops:
            logger.debug("No active stops to fetch")
            return
        await asyncio.gather(*(self._poll_stop(stop) for stop in stops))

    async def _poll_stop(self, stop: StopToFetch) -> None:
        try:
            result = await self.source.get_departures(stop.id, time_span_minutes=stop.time_span_minutes)
        except ThrottledError:
            logger.info(f"Skipped stop {stop.id} ({stop.key}): request budget exhausted")
            return
        except Exception as e:
            details = describe_error(e)
            logger.error(f"Failed to fetch departures for stop {stop.id} ({details.reason}): {e}")
            return

        try:
            await self.publish(result)
        except SinkError as e:
            logger.error(f"Failed to write departures for stop {stop.id}: {e}")

    async def publish(self, result: NormalizedStop) -> None:
        """Write one normalized board."""
        stop = result.stop
        if stop.name:
            slug = slugify(stop.name)
            await asyncio.gather(
                self.store.set(f"{VASTTRAFIK_ROOT}/stopsLookup/{stop.id}", slug),
                self.store.set(f"{VASTTRAFIK_ROOT}/departures/{slug}", result.to_record()),
            )
            logger.info(f"Wrote stop {stop.short_name or stop.name} ({slug})")
            return

        slug = await self.store.get(f"{VASTTRAFIK_ROOT}/stopsLookup/{stop.id}")
        if not slug:
            logger.debug(f"No departures for unknown stop {stop.id}, nothing to clear")
            return
        await self.store.set(f"{VASTTRAFIK_ROOT}/departures/{slug}/departures", None)
        logger.info(f"Cleared departures of stop {stop.id} ({slug})")
