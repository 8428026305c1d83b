"""Publishes traffic camera snapshots."""

from __future__ import annotations

import asyncio
import logging
from datetime import tzinfo
from typing import TYPE_CHECKING

from gbg_feeds.application.services.error_reporting import describe_error
from gbg_feeds.domain.errors import SinkError, ThrottledError

if TYPE_CHECKING:
    from gbg_feeds.domain.contracts.image_store import ImageStoreProtocol
    from gbg_feeds.domain.contracts.key_value_store import KeyValueStoreProtocol
    from gbg_feeds.domain.models.camera import CameraImage
    from gbg_feeds.domain.ports import CameraSource

logger = logging.getLogger(__name__)

CAMERA_ROOT = "gbgcamera"
SNAPSHOT_NAME_FORMAT = "%Y-%m-%d_%H-%M"


class CameraPublisher:
    """Downloads camera images, stores them and publishes their location."""

    def __init__(
        self,
        source: CameraSource,
        store: KeyValueStoreProtocol,
        image_store: ImageStoreProtocol,
        camera_ids: list[int | str],
        timezone: tzinfo,
    ) -> None:
        """Initialize the publisher.

        Args:
            source: Camera client.
            store: Store the snapshot records are written to.
            image_store: Where the image files go.
            camera_ids: Cameras to snapshot.
            timezone: Timezone used in snapshot file names.
        """
        self.source = source
        self.store = store
        self.image_store = image_store
        self.camera_ids = camera_ids
        self.timezone = timezone

    def snapshot_key(self, image: CameraImage) -> str:
        """Storage key of a snapshot, e.g. ``gbgcamera/17/2024-03-01_12-30.jpg``."""
        stamp = image.fetched_at.astimezone(self.timezone).strftime(SNAPSHOT_NAME_FORMAT)
        return f"{CAMERA_ROOT}/{image.camera_id}/{stamp}.jpg"

    async def poll(self) -> None:
        """Snapshot all configured cameras concurrently."""
        await asyncio.gather(*(self.publish_camera(camera_id) for camera_id in self.camera_ids))

    async def publish_camera(self, camera_id: int | str) -> None:
        try:
            image = await self.source.get_camera_image(camera_id)
        except ThrottledError:
            logger.info(f"Skipped camera {camera_id}: request budget exhausted")
            return
        except Exception as e:
            details = describe_error(e)
            logger.error(f"Failed to fetch image of camera {camera_id} ({details.reason}): {e}")
            return

        try:
            location = await self.image_store.save(self.snapshot_key(image), image.content)
            await self.store.set(
                f"{CAMERA_ROOT}/{image.camera_id}",
                {"image": location, "lastmodified": int(image.fetched_at.timestamp() * 1000)},
            )
        except (OSError, ValueError, SinkError) as e:
            logger.error(f"Failed to publish image of camera {camera_id}: {e}")
            return
        logger.info(f"Wrote camera {camera_id}")

    async def publish_catalog(self) -> None:
        """Write the camera catalog to ``gbgcamera/cameras``."""
        try:
            cameras = await self.source.get_cameras()
        except ThrottledError:
            logger.info("Skipped camera catalog: request budget exhausted")
            return
        except Exception as e:
            details = describe_error(e)
            logger.error(f"Failed to fetch camera catalog ({details.reason}): {e}")
            return

        try:
            await self.store.set(
                f"{CAMERA_ROOT}/cameras", {camera.id: camera.to_record() for camera in cameras}
            )
        except SinkError as e:
            logger.error(f"Failed to write camera catalog: {e}")
            return
        logger.info(f"Wrote catalog of {len(cameras)} camera(s)")
