"""Protocol for the poll scheduler."""

from typing import Protocol


class SchedulerProtocol(Protocol):
    """Starts and stops periodic polling."""

    async def start(self) -> None:
        """Start the scheduler."""
        ...

    async def stop(self) -> None:
        """Stop the scheduler."""
        ...
