"""Västtrafik API adapters."""

from gbg_feeds.adapters.vasttrafik_api.departure_parser import DepartureParser
from gbg_feeds.adapters.vasttrafik_api.vasttrafik_client import VasttrafikClient

__all__ = ["DepartureParser", "VasttrafikClient"]
