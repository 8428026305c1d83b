"""Ports (interfaces) for the ports-and-adapters architecture."""

from gbg_feeds.domain.ports.camera_source import CameraSource
from gbg_feeds.domain.ports.departure_source import DepartureSource
from gbg_feeds.domain.ports.menu_source import MenuSource

__all__ = [
    "CameraSource",
    "DepartureSource",
    "MenuSource",
]
