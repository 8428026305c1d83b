"""Protocol for the hierarchical key-value store records are published to."""

from collections.abc import Callable
from typing import Any, Protocol

ValueCallback = Callable[[Any], None]


class KeyValueStoreProtocol(Protocol):
    """A tree of JSON values addressed by slash-separated paths."""

    async def get(self, path: str) -> Any:
        """Read the value at ``path``, or None if nothing is stored there."""
        ...

    async def set(self, path: str, value: Any) -> None:
        """Replace the value at ``path``. Setting None deletes it."""
        ...

    async def update(self, path: str, values: dict[str, Any]) -> None:
        """Replace only the given children of ``path``."""
        ...

    async def push(self, path: str, value: Any) -> str:
        """Append ``value`` under a new unique child key and return the key."""
        ...

    async def subscribe(self, path: str, callback: ValueCallback) -> Callable[[], None]:
        """Call ``callback`` with the value at ``path`` now and whenever it changes.

        Returns:
            A function that cancels the subscription.
        """
        ...
