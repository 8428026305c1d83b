"""Domain layer - core models, errors and interfaces."""

from gbg_feeds.domain.models import (
    NormalizedStop,
    StopToFetch,
    WeekMenu,
)
from gbg_feeds.domain.ports import (
    CameraSource,
    DepartureSource,
    MenuSource,
)

__all__ = [
    "CameraSource",
    "DepartureSource",
    "MenuSource",
    "NormalizedStop",
    "StopToFetch",
    "WeekMenu",
]
