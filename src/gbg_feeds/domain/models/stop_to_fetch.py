"""Stop-to-fetch domain model."""

from dataclasses import dataclass
from typing import Any

DEFAULT_TIME_SPAN_MINUTES = 60


@dataclass(frozen=True)
class StopToFetch:
    """A watched stop whose departures are polled."""

    id: str
    key: str
    active: bool = True
    time_span_minutes: int = DEFAULT_TIME_SPAN_MINUTES

    @classmethod
    def from_snapshot_entry(cls, key: str, raw: Any) -> "StopToFetch | None":
        """Build a descriptor from one entry of the watched-stops snapshot.

        Entries look like ``{"id": "9022014001960001", "active": true, "timeSpan": 60}``.
        Returns None for entries without a stop id.
        """
        if not isinstance(raw, dict):
            return None
        stop_id = raw.get("id")
        if not stop_id:
            return None
        time_span = raw.get("timeSpan", raw.get("time_span_minutes", DEFAULT_TIME_SPAN_MINUTES))
        try:
            time_span = int(time_span)
        except (TypeError, ValueError):
            time_span = DEFAULT_TIME_SPAN_MINUTES
        return cls(
            id=str(stop_id),
            key=str(raw.get("key", key)),
            active=bool(raw.get("active", True)),
            time_span_minutes=time_span,
        )

    def to_snapshot_entry(self) -> dict[str, Any]:
        """Inverse of from_snapshot_entry, used when seeding the store."""
        return {"id": self.id, "active": self.active, "timeSpan": self.time_span_minutes}
