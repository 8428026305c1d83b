"""Menu source port."""

from typing import Protocol

from gbg_feeds.domain.models.menu import WeekMenu


class MenuSource(Protocol):
    """Port for retrieving normalized school menus."""

    async def get_menu(
        self,
        school_id: str,
        force: bool = False,
        week: int | None = None,
        year: int | None = None,
    ) -> WeekMenu:
        """Get one week's menu for a school.

        Raises:
            NotModified: If nothing changed since the last fetch and ``force`` is False.
        """
        ...
