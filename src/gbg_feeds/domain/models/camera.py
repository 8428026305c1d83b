"""Traffic camera domain models."""

from dataclasses import dataclass
from datetime import datetime

from gbg_feeds.domain.models.record import FeedRecord


class Camera(FeedRecord):
    """A traffic camera from the camera catalog."""

    id: str
    name: str | None = None
    image_url: str | None = None
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class CameraImage:
    """A snapshot downloaded from one camera."""

    camera_id: str
    content: bytes
    content_type: str
    fetched_at: datetime
