"""HTTP request and response value objects."""

import json
from dataclasses import dataclass, field
from typing import Any

from gbg_feeds.domain.errors import MalformedResponseError


@dataclass(frozen=True)
class RequestSpec:
    """Everything a transport needs to send one request."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)
    data: dict[str, str] | None = None  # Form-encoded body
    json: Any = None  # JSON body
    redacted_url: str | None = None  # Shown in logs and errors instead of a URL carrying a secret

    @property
    def display_url(self) -> str:
        """URL safe to write to logs."""
        return self.redacted_url or self.url


@dataclass(frozen=True)
class HttpResponse:
    """A fully read HTTP response. Header names are stored lowercase."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    url: str = ""

    @property
    def ok(self) -> bool:
        """Whether the status is 2xx."""
        return 200 <= self.status < 300

    def header(self, name: str) -> str | None:
        """Look up a header case-insensitively."""
        return self.headers.get(name.lower())

    @property
    def content_type(self) -> str:
        """Media type without parameters, e.g. ``application/json``."""
        value = self.header("Content-Type") or ""
        return value.split(";", 1)[0].strip().lower()

    def text(self) -> str:
        """Decode the body as UTF-8, replacing invalid bytes."""
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            MalformedResponseError: If the body is not valid JSON.
        """
        try:
            return json.loads(self.body)
        except (UnicodeDecodeError, ValueError) as e:
            raise MalformedResponseError(f"Response from {self.url} is not valid JSON: {e}") from e
