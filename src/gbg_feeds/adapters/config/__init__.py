"""Configuration adapters."""

from gbg_feeds.adapters.config.app_config import AppConfig
from gbg_feeds.adapters.config.stop_configuration_loader import StopConfigurationLoader

__all__ = ["AppConfig", "StopConfigurationLoader"]
