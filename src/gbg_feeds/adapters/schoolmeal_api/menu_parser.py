"""Parser for Skolmaten menu responses."""

from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from gbg_feeds.adapters.schoolmeal_api.constants import WEEKDAY_NAMES
from gbg_feeds.domain.errors import MalformedResponseError
from gbg_feeds.domain.models.menu import (
    DayMenu,
    Meal,
    MealAttribute,
    School,
    WeekMenu,
)


class MenuParser:
    """Parses raw menu responses into WeekMenu records."""

    @staticmethod
    def parse_menu(data: Any, year: int, week: int, last_modified: int) -> WeekMenu:
        """Parse a decoded menu response.

        Only the first week of the response is used; days are keyed by the
        lowercase weekday name of their date in GMT.

        Raises:
            MalformedResponseError: If the response does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise MalformedResponseError("Menu response is not an object")

        raw_school = data.get("school")
        weeks = data.get("weeks", [])
        if not isinstance(raw_school, dict) or not isinstance(weeks, list):
            raise MalformedResponseError("Menu response is missing school or weeks")

        try:
            school = School(
                id=raw_school["id"],
                name=raw_school["name"],
                url_name=raw_school["URLName"],
                image_url=raw_school.get("imageURL"),
            )
            raw_days = weeks[0].get("days", []) if weeks else []
            days = {}
            for raw_day in raw_days:
                weekday, day = MenuParser._parse_day(raw_day)
                days[weekday] = day

            raw_bulletins = data.get("bulletins")
            bulletins = list(raw_bulletins) if isinstance(raw_bulletins, list) else None

            return WeekMenu(
                year=year,
                week=week,
                school=school,
                days=days,
                bulletins=bulletins,
                last_modified=last_modified,
            )
        except ValidationError as e:
            raise MalformedResponseError(f"Menu response has unexpected values: {e}") from e
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError, OSError) as e:
            raise MalformedResponseError(f"Menu response has unexpected shape: {e!r}") from e

    @staticmethod
    def _parse_day(raw_day: dict[str, Any]) -> tuple[str, DayMenu]:
        """Parse one day. A day with a reason is closed and never has meals."""
        date = int(raw_day["date"])
        weekday = WEEKDAY_NAMES[datetime.fromtimestamp(date, UTC).weekday()]

        if "reason" in raw_day:
            return weekday, DayMenu(date=date, open=False, reason=str(raw_day["reason"] or ""))

        meals = [
            Meal(
                value=raw_meal["value"],
                attributes=[MealAttribute(id=attr) for attr in raw_meal.get("attributes") or []],
            )
            for raw_meal in raw_day.get("meals") or []
        ]
        return weekday, DayMenu(date=date, open=True, meals=meals)
