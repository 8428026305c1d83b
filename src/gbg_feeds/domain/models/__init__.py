"""Domain models for the feed poller."""

from gbg_feeds.domain.models.access_token import AccessToken
from gbg_feeds.domain.models.camera import Camera, CameraImage
from gbg_feeds.domain.models.departure import (
    Colors,
    Departure,
    DepartureTime,
    Direction,
    Line,
    NormalizedStop,
    StopInfo,
)
from gbg_feeds.domain.models.error_details import ErrorDetails
from gbg_feeds.domain.models.http import HttpResponse, RequestSpec
from gbg_feeds.domain.models.menu import DayMenu, Meal, MealAttribute, School, WeekMenu
from gbg_feeds.domain.models.record import FeedRecord
from gbg_feeds.domain.models.stop_to_fetch import StopToFetch
from gbg_feeds.domain.models.token_bucket_state import TokenBucketState

__all__ = [
    "AccessToken",
    "Camera",
    "CameraImage",
    "Colors",
    "DayMenu",
    "Departure",
    "DepartureTime",
    "Direction",
    "ErrorDetails",
    "FeedRecord",
    "HttpResponse",
    "Line",
    "Meal",
    "MealAttribute",
    "NormalizedStop",
    "RequestSpec",
    "School",
    "StopInfo",
    "StopToFetch",
    "TokenBucketState",
    "WeekMenu",
]
