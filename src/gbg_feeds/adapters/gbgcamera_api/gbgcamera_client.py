"""Göteborg traffic camera client."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from gbg_feeds.adapters.gbgcamera_api.constants import GBGCAMERA_BASE_URL
from gbg_feeds.domain.contracts.throttle import ThrottledClient
from gbg_feeds.domain.errors import HttpStatusError, MalformedResponseError
from gbg_feeds.domain.models.camera import Camera, CameraImage
from gbg_feeds.domain.models.http import RequestSpec
from gbg_feeds.domain.ports.camera_source import CameraSource

logger = logging.getLogger(__name__)


def _first(raw: dict[str, Any], *keys: str) -> Any:
    """Return the first non-empty value among several possible key spellings."""
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _as_str(value: Any) -> str | None:
    return str(value) if value is not None else None


def _as_float(value: Any) -> float | None:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class GbgCameraClient(CameraSource):
    """Downloads traffic camera snapshots and the camera catalog."""

    def __init__(
        self,
        requester: ThrottledClient,
        api_key: str,
        base_url: str = GBGCAMERA_BASE_URL,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        """Initialize the client.

        Args:
            requester: Throttled requester dedicated to the camera API.
            api_key: API key, sent as a path segment.
            base_url: Base URL of the API.
            clock: Returns the current aware time, stamped on snapshots.
        """
        self.requester = requester
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._clock = clock

    async def get_camera_image(self, camera_id: str | int) -> CameraImage:
        """Download the current image of a camera.

        Raises:
            ThrottledError: If the request was dropped by the throttle.
            HttpStatusError: If the API answered with a non-2xx status.
            MalformedResponseError: If the response is not an image.
        """
        url = f"{self.base_url}/CameraImage/{self._api_key}/{camera_id}"
        redacted_url = f"{self.base_url}/CameraImage/.../{camera_id}"
        response = await self.requester.perform_request(
            RequestSpec(method="GET", url=url, redacted_url=redacted_url)
        )
        if not response.ok:
            raise HttpStatusError(response.status, redacted_url)

        if not response.content_type.startswith("image/") or not response.body:
            raise MalformedResponseError(
                f"Camera {camera_id} returned {response.content_type or 'no content type'} "
                f"({len(response.body)} bytes) instead of an image"
            )

        return CameraImage(
            camera_id=str(camera_id),
            content=response.body,
            content_type=response.content_type,
            fetched_at=self._clock(),
        )

    async def get_cameras(self) -> list[Camera]:
        """List the cameras known to the API.

        Raises:
            ThrottledError: If the request was dropped by the throttle.
            HttpStatusError: If the API answered with a non-2xx status.
            MalformedResponseError: If the response is not a JSON list.
        """
        url = f"{self.base_url}/TrafficCameras/{self._api_key}"
        redacted_url = f"{self.base_url}/TrafficCameras/..."
        response = await self.requester.perform_request(
            RequestSpec(method="GET", url=url, params={"format": "json"}, redacted_url=redacted_url)
        )
        if not response.ok:
            raise HttpStatusError(response.status, redacted_url)

        data = response.json()
        if not isinstance(data, list):
            raise MalformedResponseError("Camera catalog is not a list")

        cameras = []
        for raw in data:
            if not isinstance(raw, dict):
                continue
            camera_id = _first(raw, "ID", "Id", "id")
            if camera_id is None:
                logger.debug(f"Skipping camera without id: {raw}")
                continue
            position = raw.get("Position") if isinstance(raw.get("Position"), dict) else {}
            cameras.append(
                Camera(
                    id=str(camera_id),
                    name=_as_str(_first(raw, "Name", "name", "Description")),
                    image_url=_as_str(_first(raw, "CameraImageUrl", "ImageUrl", "imageUrl")),
                    latitude=_as_float(_first(raw, "Lat", "Latitude") or position.get("Lat")),
                    longitude=_as_float(_first(raw, "Long", "Longitude") or position.get("Long")),
                )
            )
        return cameras
