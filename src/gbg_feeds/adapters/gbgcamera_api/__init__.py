"""Göteborg traffic camera API adapters."""

from gbg_feeds.adapters.gbgcamera_api.gbgcamera_client import GbgCameraClient

__all__ = ["GbgCameraClient"]
