"""Normalized departure board records."""

from pydantic import Field

from gbg_feeds.domain.models.record import FeedRecord


class Line(FeedRecord):
    """Line identification."""

    name: str
    short_name: str


class Direction(FeedRecord):
    """Full direction text and its display-short form."""

    long: str
    short: str


class DepartureTime(FeedRecord):
    """When a departure leaves, relative to the upstream server clock."""

    realtime: bool
    wait_ms: int
    date: str
    time: str
    datetime_utc: str


class Colors(FeedRecord):
    """Line colors as given by the upstream API."""

    foreground: str | None = None
    background: str | None = None


class Departure(FeedRecord):
    """A single normalized departure."""

    vehicle: str
    line: Line
    direction: Direction
    departure: DepartureTime
    track: str | None = None
    colors: Colors = Field(default_factory=Colors)
    booking: bool | None = None
    night: bool | None = None
    accessibility: str | list[str] | None = None


class StopInfo(FeedRecord):
    """Stop identification. Only ``id`` is set when the board was empty."""

    id: str
    name: str | None = None
    short_name: str | None = None


# line short name -> slugified full direction -> departures in upstream order
DepartureGroups = dict[str, dict[str, list[Departure]]]


class NormalizedStop(FeedRecord):
    """A departure board for one stop."""

    stop: StopInfo
    departures: DepartureGroups | None = None
