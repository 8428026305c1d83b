"""Camera source port."""

from typing import Protocol

from gbg_feeds.domain.models.camera import Camera, CameraImage


class CameraSource(Protocol):
    """Port for retrieving traffic camera snapshots."""

    async def get_camera_image(self, camera_id: str | int) -> CameraImage:
        """Download the current image of a camera."""
        ...

    async def get_cameras(self) -> list[Camera]:
        """List the available cameras."""
        ...
