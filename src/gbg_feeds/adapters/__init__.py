"""Adapters layer - external system integrations."""

from gbg_feeds.adapters.config import AppConfig
from gbg_feeds.adapters.gbgcamera_api import GbgCameraClient
from gbg_feeds.adapters.schoolmeal_api import SchoolmealClient
from gbg_feeds.adapters.vasttrafik_api import VasttrafikClient

__all__ = [
    "AppConfig",
    "GbgCameraClient",
    "SchoolmealClient",
    "VasttrafikClient",
]
