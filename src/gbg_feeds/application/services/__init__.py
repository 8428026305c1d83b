"""Application services (use cases) for publishing feed data."""

from gbg_feeds.application.services.active_stops import ActiveStopsRegistry, StopSubscription
from gbg_feeds.application.services.camera_publisher import CameraPublisher
from gbg_feeds.application.services.departure_publisher import DeparturePublisher
from gbg_feeds.application.services.error_reporting import describe_error
from gbg_feeds.application.services.menu_publisher import MenuPublisher

__all__ = [
    "ActiveStopsRegistry",
    "CameraPublisher",
    "DeparturePublisher",
    "MenuPublisher",
    "StopSubscription",
    "describe_error",
]
