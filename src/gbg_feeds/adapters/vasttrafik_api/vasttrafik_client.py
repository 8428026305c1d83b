"""Västtrafik departure board client."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, tzinfo

from gbg_feeds.adapters.vasttrafik_api.constants import (
    DATE_FORMAT,
    TIME_FORMAT,
    VASTTRAFIK_BASE_URL,
    VASTTRAFIK_TIMEZONE,
)
from gbg_feeds.adapters.vasttrafik_api.departure_parser import DepartureParser
from gbg_feeds.domain.contracts.access_token_provider import AccessTokenProvider
from gbg_feeds.domain.contracts.throttle import ThrottledClient
from gbg_feeds.domain.errors import HttpStatusError
from gbg_feeds.domain.models.departure import NormalizedStop
from gbg_feeds.domain.models.http import RequestSpec
from gbg_feeds.domain.ports.departure_source import DepartureSource

logger = logging.getLogger(__name__)


class VasttrafikClient(DepartureSource):
    """Fetches and normalizes departure boards from Västtrafik."""

    def __init__(
        self,
        requester: ThrottledClient,
        auth: AccessTokenProvider,
        base_url: str = VASTTRAFIK_BASE_URL,
        timezone: tzinfo = VASTTRAFIK_TIMEZONE,
    ) -> None:
        """Initialize the client.

        Args:
            requester: Throttled requester dedicated to Västtrafik.
            auth: Provider of bearer tokens for the API.
            base_url: Base URL of the REST API.
            timezone: Civil timezone used for query and response dates.
        """
        self.requester = requester
        self.auth = auth
        self.base_url = base_url.rstrip("/")
        self.timezone = timezone

    def _local_time(self, at_time: datetime | None) -> datetime:
        if at_time is None:
            return datetime.now(UTC).astimezone(self.timezone)
        if at_time.tzinfo is None:
            return at_time.replace(tzinfo=self.timezone)
        return at_time.astimezone(self.timezone)

    async def get_departures(
        self,
        stop_id: str,
        at_time: datetime | None = None,
        time_span_minutes: int = 60,
    ) -> NormalizedStop:
        """Get departures from a stop.

        Args:
            stop_id: Västtrafik stop id.
            at_time: Time to get departures from (default: now).
            time_span_minutes: How far ahead to list departures, up to 24 hours.

        Returns:
            The normalized departure board.

        Raises:
            AuthError: If no access token could be obtained.
            ThrottledError: If the request was dropped by the throttle.
            HttpStatusError: If the API answered with a non-2xx status.
            MalformedResponseError: If the response could not be parsed.
        """
        token = await self.auth.get_access_token()
        local_time = self._local_time(at_time)

        url = f"{self.base_url}/departureBoard"
        spec = RequestSpec(
            method="GET",
            url=url,
            params={
                "id": stop_id,
                "date": local_time.strftime(DATE_FORMAT),
                "time": local_time.strftime(TIME_FORMAT),
                "timeSpan": str(time_span_minutes),
                "needJourneyDetail": "0",
                "format": "json",
            },
            headers={"Authorization": f"Bearer {token}"},
        )

        response = await self.requester.perform_request(spec)
        if not response.ok:
            raise HttpStatusError(response.status, url, response.text())

        result = DepartureParser.parse_departure_board(response.json(), stop_id, self.timezone)
        logger.debug(
            f"Parsed departures for stop {stop_id}: "
            f"{sum(len(groups) for groups in (result.departures or {}).values())} direction group(s)"
        )
        return result
