"""Parser for Västtrafik departureBoard responses."""

import logging
from datetime import UTC, datetime, tzinfo
from typing import Any

from pydantic import ValidationError

from gbg_feeds.adapters.vasttrafik_api.constants import (
    DATE_FORMAT,
    TIME_FORMAT,
    VASTTRAFIK_TIMEZONE,
)
from gbg_feeds.domain.errors import MalformedResponseError
from gbg_feeds.domain.models.departure import (
    Colors,
    Departure,
    DepartureGroups,
    DepartureTime,
    Direction,
    Line,
    NormalizedStop,
    StopInfo,
)
from gbg_feeds.domain.text import slugify

logger = logging.getLogger(__name__)


def short_direction(direction: str) -> str:
    """Strip a trailing " via ..." and then a comma suffix from a direction.

    >>> short_direction("Östra Sjukhuset via Centralstationen, Göteborg")
    'Östra Sjukhuset'
    """
    short = direction
    via_index = short.find(" via ")
    if via_index > 0:
        short = short[:via_index]
    comma_index = short.find(",")
    if comma_index > 0:
        short = short[:comma_index]
    return short


def short_stop_name(name: str) -> str:
    """Stop name up to the first comma ("Chalmers, Göteborg" -> "Chalmers")."""
    comma_index = name.find(",")
    return name[:comma_index] if comma_index > 0 else name


class DepartureParser:
    """Parses raw departureBoard responses into NormalizedStop records."""

    @staticmethod
    def parse_departure_board(
        data: Any, stop_id: str, timezone: tzinfo = VASTTRAFIK_TIMEZONE
    ) -> NormalizedStop:
        """Parse a decoded departureBoard response.

        Args:
            data: Decoded JSON body, ``{"DepartureBoard": {...}}``.
            stop_id: The stop id that was requested.
            timezone: Civil timezone of the dates and times in the response.

        Returns:
            The normalized stop. When the board has no departures only the
            stop id is set.

        Raises:
            MalformedResponseError: If the response does not have the expected shape.
        """
        board = data.get("DepartureBoard") if isinstance(data, dict) else None
        if not isinstance(board, dict):
            raise MalformedResponseError("Response has no DepartureBoard object")

        if board.get("error"):
            reason = board.get("errorText") or board["error"]
            raise MalformedResponseError(f"Departure board for {stop_id} has an error: {reason}")

        raw_departures = DepartureParser._as_list(board.get("Departure"))
        if not raw_departures:
            return NormalizedStop(stop=StopInfo(id=stop_id))

        server_moment = DepartureParser._parse_moment(
            board.get("serverdate"), board.get("servertime"), timezone
        )
        if server_moment is None:
            raise MalformedResponseError(
                f"Departure board for {stop_id} has departures but no server date/time"
            )

        groups: DepartureGroups = {}
        for raw in raw_departures:
            departure = DepartureParser._parse_departure(raw, server_moment, timezone)
            by_direction = groups.setdefault(departure.line.short_name, {})
            by_direction.setdefault(slugify(departure.direction.long), []).append(departure)

        stop_name = str(raw_departures[0].get("stop", ""))
        return NormalizedStop(
            stop=StopInfo(
                id=stop_id,
                name=stop_name or None,
                short_name=short_stop_name(stop_name) or None,
            ),
            departures=groups,
        )

    @staticmethod
    def _as_list(value: Any) -> list[dict[str, Any]]:
        """The Departure field is absent, a single object, or a list of objects."""
        if value is None:
            return []
        items = value if isinstance(value, list) else [value]
        for item in items:
            if not isinstance(item, dict):
                raise MalformedResponseError(f"Unexpected departure entry: {item!r}")
        return items

    @staticmethod
    def _parse_moment(date: Any, time: Any, timezone: tzinfo) -> datetime | None:
        """Combine a board date and time into an aware datetime."""
        if not date or not time:
            return None
        try:
            naive = datetime.strptime(f"{date} {time}", f"{DATE_FORMAT} {TIME_FORMAT}")
        except (TypeError, ValueError):
            return None
        return naive.replace(tzinfo=timezone)

    @staticmethod
    def _departure_date_time(raw: dict[str, Any]) -> tuple[str, str, bool]:
        """Pick real-time date/time when both are present, else the timetable ones.

        Returns:
            (date, time, realtime)
        """
        rt_date = raw.get("rtDate")
        rt_time = raw.get("rtTime")
        if rt_date and rt_time:
            return str(rt_date), str(rt_time), True
        return str(raw["date"]), str(raw["time"]), False

    @staticmethod
    def _parse_departure(
        raw: dict[str, Any], server_moment: datetime, timezone: tzinfo
    ) -> Departure:
        """Parse a single raw departure."""
        try:
            date, time, realtime = DepartureParser._departure_date_time(raw)
            direction = str(raw["direction"])
            departure_moment = DepartureParser._parse_moment(date, time, timezone)
            if departure_moment is None:
                raise MalformedResponseError(f"Invalid departure date/time: {date} {time}")

            # Aware datetimes sharing a tzinfo subtract as wall time, so compare in UTC
            wait = departure_moment.astimezone(UTC) - server_moment.astimezone(UTC)

            return Departure(
                vehicle=str(raw.get("type", "")),
                line=Line(name=str(raw.get("name", raw["sname"])), short_name=str(raw["sname"])),
                direction=Direction(long=direction, short=short_direction(direction)),
                departure=DepartureTime(
                    realtime=realtime,
                    wait_ms=int(wait.total_seconds() * 1000),
                    date=date,
                    time=time,
                    datetime_utc=departure_moment.astimezone(UTC).isoformat().replace("+00:00", "Z"),
                ),
                track=raw.get("rtTrack") or raw.get("track"),
                colors=Colors(foreground=raw.get("fgColor"), background=raw.get("bgColor")),
                booking=raw.get("booking"),
                night=raw.get("night"),
                accessibility=raw.get("accessibility"),
            )
        except KeyError as e:
            raise MalformedResponseError(f"Departure entry is missing {e}") from e
        except ValidationError as e:
            raise MalformedResponseError(f"Departure entry has unexpected values: {e}") from e
