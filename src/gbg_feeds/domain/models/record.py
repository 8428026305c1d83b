"""Base class for records written to the key-value store."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FeedRecord(BaseModel):
    """Immutable record serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    def to_record(self) -> dict[str, Any]:
        """Dump to the JSON-compatible shape stored in the sink.

        Unset optional fields are left out instead of being written as null.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
