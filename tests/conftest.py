"""Shared fixtures: an in-process HTTP transport and controllable clocks."""

import json
from collections.abc import Callable
from typing import Any

import pytest

from gbg_feeds.domain.models.http import HttpResponse, RequestSpec


def json_response(data: Any, status: int = 200, headers: dict[str, str] | None = None) -> HttpResponse:
    """Build a JSON response as the transport would return it."""
    all_headers = {"content-type": "application/json; charset=utf-8"}
    all_headers.update({k.lower(): v for k, v in (headers or {}).items()})
    return HttpResponse(status=status, headers=all_headers, body=json.dumps(data).encode())


class FakeTransport:
    """Records requests and answers them from a queue or a handler."""

    def __init__(self, *responses: HttpResponse | Exception) -> None:
        self.requests: list[RequestSpec] = []
        self._responses: list[HttpResponse | Exception] = list(responses)
        self.handler: Callable[[RequestSpec], HttpResponse] | None = None

    def queue(self, *responses: HttpResponse | Exception) -> None:
        self._responses.extend(responses)

    async def request(self, spec: RequestSpec) -> HttpResponse:
        self.requests.append(spec)
        if self.handler is not None:
            return self.handler(spec)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {spec.method} {spec.url}")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def call_count(self) -> int:
        return len(self.requests)


class FakeClock:
    """A clock returning seconds that only moves when told to."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class AlwaysAdmit:
    """Throttle that never denies a request."""

    def __init__(self) -> None:
        self.calls = 0

    def admit(self) -> bool:
        self.calls += 1
        return True


class NeverAdmit:
    """Throttle that denies every request."""

    def admit(self) -> bool:
        return False


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
