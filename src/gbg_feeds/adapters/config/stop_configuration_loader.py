"""Stop configuration loader."""

import logging

from gbg_feeds.adapters.config.app_config import AppConfig
from gbg_feeds.domain.models.stop_to_fetch import DEFAULT_TIME_SPAN_MINUTES, StopToFetch
from gbg_feeds.domain.text import slugify

logger = logging.getLogger(__name__)


class StopConfigurationLoader:
    """Loads the watched stops the store is seeded with."""

    @staticmethod
    def load(config: AppConfig) -> list[StopToFetch]:
        """Load stop descriptors from the ``[[stops]]`` section.

        Each entry needs an ``id``; ``key`` defaults to a slug of ``name`` or
        the id, ``active`` to true and ``time_span`` to 60 minutes.
        """
        stops: list[StopToFetch] = []
        seen_keys: set[str] = set()

        for stop_data in config.get_stops_config():
            stop_id = stop_data.get("id") or stop_data.get("station_id")
            if not stop_id:
                logger.warning(f"Skipping stop without id: {stop_data}")
                continue
            stop_id = str(stop_id)

            key = stop_data.get("key") or slugify(str(stop_data.get("name", ""))) or stop_id
            if key in seen_keys:
                raise ValueError(f"Stop keys must be unique. Duplicate key found: {key}")
            seen_keys.add(key)

            time_span = stop_data.get("time_span", stop_data.get("timeSpan", DEFAULT_TIME_SPAN_MINUTES))
            try:
                time_span = int(time_span)
                # Values below one minute fall back to the default
                if time_span < 1:
                    time_span = DEFAULT_TIME_SPAN_MINUTES
            except (ValueError, TypeError):
                time_span = DEFAULT_TIME_SPAN_MINUTES

            stops.append(
                StopToFetch(
                    id=stop_id,
                    key=str(key),
                    active=bool(stop_data.get("active", True)),
                    time_span_minutes=time_span,
                )
            )

        return stops
