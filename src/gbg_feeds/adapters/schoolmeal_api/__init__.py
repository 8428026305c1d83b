"""Skolmaten API adapters."""

from gbg_feeds.adapters.schoolmeal_api.menu_parser import MenuParser
from gbg_feeds.adapters.schoolmeal_api.schoolmeal_client import SchoolmealClient

__all__ = ["MenuParser", "SchoolmealClient"]
