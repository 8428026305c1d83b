"""Publishes the weekly school menu."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from gbg_feeds.application.services.error_reporting import describe_error
from gbg_feeds.domain.errors import NotModified, ThrottledError

if TYPE_CHECKING:
    from gbg_feeds.domain.contracts.key_value_store import KeyValueStoreProtocol
    from gbg_feeds.domain.models.menu import WeekMenu
    from gbg_feeds.domain.ports import MenuSource

logger = logging.getLogger(__name__)

SCHOOLS_ROOT = "schoolmeal/schools"


class MenuPublisher:
    """Fetches one school's menu and writes it under ``schoolmeal/schools``."""

    def __init__(self, source: MenuSource, store: KeyValueStoreProtocol, school_id: str) -> None:
        """Initialize the publisher.

        Args:
            source: Menu client.
            store: Store the menu is written to.
            school_id: School to poll.
        """
        self.source = source
        self.store = store
        self.school_id = school_id

    async def poll(self, force: bool = False) -> None:
        """Fetch the current week's menu and publish it if it changed.

        Args:
            force: Ask for the menu even if it has not changed upstream.
        """
        try:
            menu = await self.source.get_menu(self.school_id, force=force)
        except NotModified:
            logger.info(f"Menu for {self.school_id} is already up to date")
            return
        except ThrottledError:
            logger.info(f"Skipped menu for {self.school_id}: request budget exhausted")
            return
        except Exception as e:
            details = describe_error(e)
            logger.error(f"Failed to fetch menu for {self.school_id} ({details.reason}): {e}")
            return

        await self.publish(menu)

    async def poll_forced(self) -> None:
        await self.poll(force=True)

    async def publish(self, menu: WeekMenu) -> None:
        """Write school info, the week's menu and the latest pointer.

        The three writes are independent; a failed write is logged and does
        not stop the others.
        """
        school_path = f"{SCHOOLS_ROOT}/{menu.school.url_name}"
        record = menu.to_record()
        writes = {
            "school": self.store.update(f"{school_path}/school", menu.school.to_record()),
            "week": self.store.update(f"{school_path}/{menu.year}/{menu.week}", record),
            "latest": self.store.set(f"{school_path}/latest", record),
        }
        results = await asyncio.gather(*writes.values(), return_exceptions=True)

        for name, result in zip(writes, results, strict=True):
            if isinstance(result, Exception):
                logger.error(
                    f"Failed to write {name} menu for {menu.school.name} "
                    f"week {menu.week} {menu.year}: {result}"
                )
            else:
                logger.info(f"Wrote {name} menu for {menu.school.name} week {menu.week} {menu.year}")
