"""Normalized school menu records."""

from typing import Any

from pydantic import Field, model_validator

from gbg_feeds.domain.models.record import FeedRecord


class School(FeedRecord):
    """School identification as published by the menu API."""

    id: int
    name: str
    url_name: str = Field(alias="URLName")
    image_url: str | None = Field(default=None, alias="imageURL")


class MealAttribute(FeedRecord):
    """A dietary attribute reference."""

    id: int


class Meal(FeedRecord):
    """One dish served on a day."""

    value: str
    attributes: list[MealAttribute] = Field(default_factory=list)


class DayMenu(FeedRecord):
    """What is served on one day, or why the kitchen is closed.

    An open day carries ``meals`` and no ``reason``; a closed day carries a
    ``reason`` and no ``meals``.
    """

    date: int  # Unix timestamp, seconds
    open: bool
    meals: list[Meal] | None = None
    reason: str | None = None

    @model_validator(mode="after")
    def _check_open_or_closed(self) -> "DayMenu":
        if self.open and (self.meals is None or self.reason is not None):
            raise ValueError("an open day must have meals and no reason")
        if not self.open and (self.reason is None or self.meals is not None):
            raise ValueError("a closed day must have a reason and no meals")
        return self


class WeekMenu(FeedRecord):
    """A week of menus keyed by lowercase weekday name."""

    year: int
    week: int
    school: School
    days: dict[str, DayMenu] = Field(default_factory=dict)
    bulletins: list[Any] | None = None  # Notices from the school, kept as the API sent them
    last_modified: int = 0  # Watermark in epoch milliseconds
