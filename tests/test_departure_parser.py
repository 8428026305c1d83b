"""Tests for the Västtrafik departure board parser."""

from typing import Any

import pytest

from gbg_feeds.adapters.vasttrafik_api.departure_parser import (
    DepartureParser,
    short_direction,
    short_stop_name,
)
from gbg_feeds.domain.errors import MalformedResponseError

STOP_ID = "9022014001960001"


def _departure(**overrides: Any) -> dict[str, Any]:
    raw = {
        "name": "Spårvagn 7",
        "sname": "7",
        "type": "TRAM",
        "stop": "Chalmers, Göteborg",
        "stopid": "9022014001960002",
        "date": "2024-03-01",
        "time": "12:05",
        "track": "A",
        "direction": "Bergsjön via Centralstationen, Göteborg",
        "fgColor": "#ffffff",
        "bgColor": "#7d4313",
        "accessibility": "wheelChair",
    }
    raw.update(overrides)
    return raw


def _board(departures: Any = None, **board: Any) -> dict[str, Any]:
    result: dict[str, Any] = {"serverdate": "2024-03-01", "servertime": "12:00", **board}
    if departures is not None:
        result["Departure"] = departures
    return {"DepartureBoard": result}


class TestShortNames:
    """Tests for the short name helpers."""

    @pytest.mark.parametrize(
        "direction,expected",
        [
            ("Bergsjön via Centralstationen, Göteborg", "Bergsjön"),
            ("Bergsjön, Göteborg", "Bergsjön"),
            ("Bergsjön", "Bergsjön"),
            ("Kortedala via Nordstan", "Kortedala"),
        ],
    )
    def test_short_direction(self, direction: str, expected: str) -> None:
        """Given a direction, when shortening, then " via" and comma suffixes are removed."""
        assert short_direction(direction) == expected

    def test_short_stop_name_without_comma_is_whole_name(self) -> None:
        """Given a name without comma, when shortening, then the whole name is kept."""
        assert short_stop_name("Chalmers") == "Chalmers"
        assert short_stop_name("Chalmers, Göteborg") == "Chalmers"


class TestParseDepartureBoard:
    """Tests for DepartureParser.parse_departure_board."""

    def test_when_departure_is_single_object_then_same_as_one_element_list(self) -> None:
        """Given Departure as an object, when parsing, then equals parsing a one-element list."""
        as_object = DepartureParser.parse_departure_board(_board(_departure()), STOP_ID)
        as_list = DepartureParser.parse_departure_board(_board([_departure()]), STOP_ID)

        assert as_object == as_list

    @pytest.mark.parametrize("departures", [None, []])
    def test_when_board_is_empty_then_only_stop_id(self, departures: Any) -> None:
        """Given no departures, when parsing, then the record is just the stop id."""
        result = DepartureParser.parse_departure_board(_board(departures), STOP_ID)

        assert result.to_record() == {"stop": {"id": STOP_ID}}

    def test_when_empty_board_without_server_time_then_still_only_stop_id(self) -> None:
        """Given no departures and no server date, when parsing, then no error is raised."""
        result = DepartureParser.parse_departure_board({"DepartureBoard": {}}, STOP_ID)

        assert result.departures is None

    def test_normalizes_a_timetable_departure(self) -> None:
        """Given a departure without real-time data, when parsing, then timetable values are used."""
        result = DepartureParser.parse_departure_board(_board([_departure()]), STOP_ID)

        record = result.to_record()
        assert record["stop"] == {"id": STOP_ID, "name": "Chalmers, Göteborg", "shortName": "Chalmers"}
        departure = record["departures"]["7"]["bergsjon-via-centralstationen-goteborg"][0]
        assert departure == {
            "vehicle": "TRAM",
            "line": {"name": "Spårvagn 7", "shortName": "7"},
            "direction": {"long": "Bergsjön via Centralstationen, Göteborg", "short": "Bergsjön"},
            "departure": {
                "realtime": False,
                "waitMs": 300_000,
                "date": "2024-03-01",
                "time": "12:05",
                "datetimeUtc": "2024-03-01T11:05:00Z",
            },
            "track": "A",
            "colors": {"foreground": "#ffffff", "background": "#7d4313"},
            "accessibility": "wheelChair",
        }

    def test_when_realtime_date_and_time_present_then_realtime(self) -> None:
        """Given rtDate and rtTime, when parsing, then real-time values win and realtime is true."""
        raw = _departure(rtDate="2024-03-01", rtTime="12:07", rtTrack="B")

        result = DepartureParser.parse_departure_board(_board([raw]), STOP_ID)

        departure = result.departures["7"]["bergsjon-via-centralstationen-goteborg"][0]
        assert departure.departure.realtime is True
        assert departure.departure.time == "12:07"
        assert departure.departure.wait_ms == 420_000
        assert departure.track == "B"

    def test_when_only_realtime_time_present_then_falls_back_to_timetable(self) -> None:
        """Given rtTime without rtDate, when parsing, then the timetable time is used."""
        raw = _departure(rtTime="12:09")

        result = DepartureParser.parse_departure_board(_board([raw]), STOP_ID)

        departure = result.departures["7"]["bergsjon-via-centralstationen-goteborg"][0]
        assert departure.departure.realtime is False
        assert departure.departure.time == "12:05"

    def test_when_departure_is_past_midnight_then_wait_spans_the_day(self) -> None:
        """Given a departure after midnight, when parsing, then the wait is computed across days."""
        raw = _departure(date="2024-03-02", time="00:10")
        board = _board([raw], serverdate="2024-03-01", servertime="23:55")

        result = DepartureParser.parse_departure_board(board, STOP_ID)

        departure = result.departures["7"]["bergsjon-via-centralstationen-goteborg"][0]
        assert departure.departure.wait_ms == 15 * 60 * 1000

    def test_groups_by_line_then_full_direction_preserving_order(self) -> None:
        """Given mixed departures, when parsing, then grouped by line and full direction in order."""
        raws = [
            _departure(time="12:01"),
            _departure(sname="6", name="Spårvagn 6", direction="Kortedala", time="12:02"),
            _departure(time="12:03", direction="Bergsjön, Göteborg"),
            _departure(time="12:04"),
        ]

        result = DepartureParser.parse_departure_board(_board(raws), STOP_ID)

        assert list(result.departures) == ["7", "6"]
        assert list(result.departures["7"]) == [
            "bergsjon-via-centralstationen-goteborg",
            "bergsjon-goteborg",
        ]
        times = [d.departure.time for d in result.departures["7"]["bergsjon-via-centralstationen-goteborg"]]
        assert times == ["12:01", "12:04"]

    def test_stop_id_is_the_requested_id(self) -> None:
        """Given entries carrying a platform stop id, when parsing, then the requested id is kept."""
        result = DepartureParser.parse_departure_board(_board([_departure()]), STOP_ID)

        assert result.stop.id == STOP_ID

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"Something": {}},
            {"DepartureBoard": {"error": "R0007", "errorText": "Internal error"}},
            _board([_departure()], serverdate=None),
            _board([_departure(date=None, time=None)]),
            _board([{"sname": "7"}]),
            _board(["not an object"]),
        ],
    )
    def test_when_shape_is_unexpected_then_raises_malformed(self, data: Any) -> None:
        """Given an unexpected response shape, when parsing, then MalformedResponseError."""
        with pytest.raises(MalformedResponseError):
            DepartureParser.parse_departure_board(data, STOP_ID)
