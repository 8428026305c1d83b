"""Skolmaten school menu client."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from email.utils import format_datetime, parsedate_to_datetime

from gbg_feeds.adapters.schoolmeal_api.constants import SCHOOLMEAL_BASE_URL
from gbg_feeds.adapters.schoolmeal_api.menu_parser import MenuParser
from gbg_feeds.domain.contracts.throttle import ThrottledClient
from gbg_feeds.domain.errors import HttpStatusError, NotModified
from gbg_feeds.domain.models.http import RequestSpec
from gbg_feeds.domain.models.menu import WeekMenu
from gbg_feeds.domain.ports.menu_source import MenuSource

logger = logging.getLogger(__name__)


def format_http_date(epoch_ms: int) -> str:
    """Format epoch milliseconds as an HTTP date ("Mon, 01 Jan 2024 00:00:00 GMT")."""
    return format_datetime(datetime.fromtimestamp(epoch_ms / 1000, UTC), usegmt=True)


def parse_http_date(value: str) -> int | None:
    """Parse an HTTP date into epoch milliseconds, or None if it is not a date."""
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp() * 1000)


class SchoolmealClient(MenuSource):
    """Fetches and normalizes school menus from Skolmaten.

    Keeps a Last-Modified watermark so unchanged menus are answered with
    304 Not Modified. The watermark only ever moves forward, so a late
    response to an older request cannot roll it back.
    """

    def __init__(
        self,
        requester: ThrottledClient,
        client_id: str,
        version_token: str | None = None,
        base_url: str = SCHOOLMEAL_BASE_URL,
    ) -> None:
        """Initialize the client.

        Args:
            requester: Throttled requester dedicated to Skolmaten.
            client_id: The client (API key) sent with every request.
            version_token: Optional token selecting the API version.
            base_url: Base URL of the API.
        """
        self.requester = requester
        self.client_id = client_id
        self.version_token = version_token
        self.base_url = base_url.rstrip("/")
        self._last_modified = 0

    @property
    def last_modified(self) -> int:
        """Watermark of the newest Last-Modified seen, in epoch milliseconds (0 if none)."""
        return self._last_modified

    def advance_watermark(self, value: int) -> None:
        """Move the watermark forward. Older or equal values are ignored."""
        if value > self._last_modified:
            self._last_modified = value

    async def get_menu(
        self,
        school_id: str,
        force: bool = False,
        week: int | None = None,
        year: int | None = None,
    ) -> WeekMenu:
        """Get the menu of a school for one week.

        Args:
            school_id: The school's URL name, e.g. ``it-gymnasiet-goteborg``.
            force: Skip the If-Modified-Since header and always fetch.
            week: ISO week number (default: current week in GMT).
            year: ISO year (default: current ISO year in GMT).

        Raises:
            NotModified: If the API answered 304.
            ThrottledError: If the request was dropped by the throttle.
            HttpStatusError: For any other non-2xx status.
            MalformedResponseError: If the response could not be parsed.
        """
        iso_now = datetime.now(UTC).isocalendar()
        week = week if week is not None else iso_now.week
        year = year if year is not None else iso_now.year

        headers: dict[str, str] = {}
        if not force and self._last_modified > 0:
            headers["If-Modified-Since"] = format_http_date(self._last_modified)

        params = {
            "client": self.client_id,
            "school": school_id,
            "week": str(week),
            "year": str(year),
        }
        if self.version_token:
            params["clientVersion"] = self.version_token

        url = f"{self.base_url}/menu"
        response = await self.requester.perform_request(
            RequestSpec(method="GET", url=url, headers=headers, params=params)
        )

        if response.status == 304:
            raise NotModified(f"Menu for {school_id} week {week}/{year} is unchanged")
        if not response.ok:
            raise HttpStatusError(response.status, url, response.text())

        data = response.json()

        last_modified = self._last_modified
        header_value = response.header("Last-Modified")
        if header_value:
            parsed = parse_http_date(header_value)
            if parsed is None:
                logger.warning(f"Ignoring unparseable Last-Modified header: {header_value!r}")
            else:
                last_modified = max(last_modified, parsed)

        menu = MenuParser.parse_menu(data, year=year, week=week, last_modified=last_modified)
        self.advance_watermark(last_modified)
        return menu
