"""Main entry point for the feed poller."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from datetime import time, timedelta
from pathlib import Path

import aiohttp

from gbg_feeds.adapters.config import AppConfig, StopConfigurationLoader
from gbg_feeds.adapters.gbgcamera_api import GbgCameraClient
from gbg_feeds.adapters.http import AiohttpTransport
from gbg_feeds.adapters.oauth import AccessTokenCache
from gbg_feeds.adapters.scheduling import DailySchedule, IntervalSchedule, PollJob, PollScheduler
from gbg_feeds.adapters.schoolmeal_api import SchoolmealClient
from gbg_feeds.adapters.sinks import RestKeyValueStore, create_key_value_store
from gbg_feeds.adapters.storage import LocalImageStore
from gbg_feeds.adapters.throttling import ThrottledRequester, create_throttle
from gbg_feeds.adapters.vasttrafik_api import VasttrafikClient
from gbg_feeds.application.services import (
    ActiveStopsRegistry,
    CameraPublisher,
    DeparturePublisher,
    MenuPublisher,
    StopSubscription,
)
from gbg_feeds.domain.contracts.http_transport import HttpTransport  # noqa: TC001

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceClients:
    """One client per upstream API, each with its own throttle."""

    vasttrafik: VasttrafikClient
    schoolmeal: SchoolmealClient
    gbgcamera: GbgCameraClient


def create_session(config: AppConfig) -> aiohttp.ClientSession:
    """Create the HTTP session shared by all clients."""
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=config.request_timeout_seconds)
    )


def _requester(
    config: AppConfig, transport: HttpTransport, name: str, capacity: int, refill_interval_ms: int
) -> ThrottledRequester:
    throttle = create_throttle(name, capacity, refill_interval_ms, strategy=config.throttle_strategy)
    return ThrottledRequester(throttle, transport, name=name)


def build_clients(config: AppConfig, transport: HttpTransport) -> SourceClients:
    """Create the source clients with one throttle per API."""
    auth = AccessTokenCache(
        config.vasttrafik_access_token_url,
        config.vasttrafik_consumer_key,
        config.vasttrafik_consumer_secret,
        transport,
    )
    vasttrafik = VasttrafikClient(
        _requester(
            config,
            transport,
            "vasttrafik",
            config.vasttrafik_bucket_capacity,
            config.vasttrafik_refill_interval_ms,
        ),
        auth,
        base_url=config.vasttrafik_base_url,
        timezone=config.tz,
    )
    schoolmeal = SchoolmealClient(
        _requester(
            config,
            transport,
            "schoolmeal",
            config.schoolmeal_bucket_capacity,
            config.schoolmeal_refill_interval_ms,
        ),
        config.schoolmeal_client,
        version_token=config.schoolmeal_version_token,
        base_url=config.schoolmeal_base_url,
    )
    gbgcamera = GbgCameraClient(
        _requester(
            config,
            transport,
            "gbgcamera",
            config.gbgcamera_bucket_capacity,
            config.gbgcamera_refill_interval_ms,
        ),
        config.gbgcamera_apikey,
        base_url=config.gbgcamera_base_url,
    )
    return SourceClients(vasttrafik=vasttrafik, schoolmeal=schoolmeal, gbgcamera=gbgcamera)


def build_jobs(
    config: AppConfig,
    departures: DeparturePublisher,
    menus: MenuPublisher,
    cameras: CameraPublisher,
) -> list[PollJob]:
    """Create the poll jobs with their schedules."""
    return [
        PollJob(
            "vasttrafik",
            IntervalSchedule(timedelta(seconds=config.vasttrafik_poll_interval_seconds)),
            departures.poll,
        ),
        PollJob(
            "gbgcamera",
            IntervalSchedule(timedelta(seconds=config.gbgcamera_poll_interval_seconds)),
            cameras.poll,
        ),
        PollJob(
            "schoolmeal",
            IntervalSchedule(timedelta(minutes=config.schoolmeal_poll_interval_minutes)),
            menus.poll,
            fire_on_start=True,
        ),
        PollJob(
            "schoolmeal-forced",
            DailySchedule(config.schoolmeal_force_refresh_at),
            menus.poll_forced,
        ),
        PollJob(
            "gbgcamera-catalog",
            DailySchedule(time(0, 0)),
            cameras.publish_catalog,
            fire_on_start=True,
        ),
    ]


def _warn_missing_credentials(config: AppConfig) -> None:
    if not config.vasttrafik_consumer_key or not config.vasttrafik_consumer_secret:
        logger.warning("Västtrafik consumer key/secret not set, departure polls will fail")
    if not config.schoolmeal_client:
        logger.warning("Skolmaten client id not set, menu polls will fail")
    if not config.gbgcamera_apikey:
        logger.warning("Traffic camera API key not set, camera polls will fail")


async def run(config: AppConfig) -> None:
    """Wire everything up and poll until cancelled."""
    stops = StopConfigurationLoader.load(config)
    logger.info(f"Loaded {len(stops)} configured stop(s)")
    _warn_missing_credentials(config)

    async with create_session(config) as session:
        transport = AiohttpTransport(session)
        store = create_key_value_store(config, transport)
        clients = build_clients(config, transport)

        registry = ActiveStopsRegistry()
        subscription = StopSubscription(store, registry)
        await subscription.seed(stops)
        await subscription.start()

        departures = DeparturePublisher(clients.vasttrafik, store, registry)
        menus = MenuPublisher(clients.schoolmeal, store, config.schoolmeal_school_id)
        cameras = CameraPublisher(
            clients.gbgcamera,
            store,
            LocalImageStore(Path(config.image_directory)),
            list(config.gbgcamera_cameras),
            config.tz,
        )

        scheduler = PollScheduler(build_jobs(config, departures, menus, cameras), config.tz)

        await scheduler.start()

        try:
            await asyncio.Event().wait()
        finally:
            logger.info("Shutting down...")
            await scheduler.stop()
            await subscription.stop()
            if isinstance(store, RestKeyValueStore):
                await store.close()


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()

    try:
        config.load_file()
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    await run(config)


if __name__ == "__main__":
    asyncio.run(main())
