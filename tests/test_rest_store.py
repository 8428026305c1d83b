"""Tests for the REST key-value store."""

import asyncio
from typing import Any

import aiohttp
import pytest

from conftest import FakeTransport, json_response
from gbg_feeds.adapters.sinks import RestKeyValueStore
from gbg_feeds.domain.errors import SinkError, SinkWriteError
from gbg_feeds.domain.models.http import RequestSpec

BASE_URL = "https://db.example.com"


class TestRestKeyValueStore:
    """Tests for RestKeyValueStore."""

    @pytest.mark.asyncio
    async def test_set_puts_json_with_auth(self) -> None:
        """Given an auth token, when setting a value, then PUT <path>.json with auth param."""
        transport = FakeTransport(json_response({"a": 1}))
        store = RestKeyValueStore(transport, BASE_URL + "/", auth_token="tok")

        await store.set("/gbgcamera/17", {"a": 1})

        request = transport.requests[0]
        assert request.method == "PUT"
        assert request.url == f"{BASE_URL}/gbgcamera/17.json"
        assert request.params == {"auth": "tok"}
        assert request.json == {"a": 1}

    @pytest.mark.asyncio
    async def test_set_none_deletes(self) -> None:
        """Given None, when setting, then DELETE is sent."""
        transport = FakeTransport(json_response(None))
        store = RestKeyValueStore(transport, BASE_URL)

        await store.set("vasttrafik/departures/x/departures", None)

        assert transport.requests[0].method == "DELETE"
        assert transport.requests[0].params == {}

    @pytest.mark.asyncio
    async def test_update_patches(self) -> None:
        """Given children, when updating, then PATCH with those children."""
        transport = FakeTransport(json_response({"name": "x"}))
        store = RestKeyValueStore(transport, BASE_URL)

        await store.update("schoolmeal/schools/x/school", {"name": "x"})

        assert transport.requests[0].method == "PATCH"
        assert transport.requests[0].json == {"name": "x"}

    @pytest.mark.asyncio
    async def test_push_returns_generated_name(self) -> None:
        """Given a POST answer with a name, when pushing, then the name is returned."""
        store = RestKeyValueStore(FakeTransport(json_response({"name": "-Nabc"})), BASE_URL)

        assert await store.push("log", {"x": 1}) == "-Nabc"

    @pytest.mark.asyncio
    async def test_when_write_fails_then_raises_sink_write_error(self) -> None:
        """Given a 401, when writing, then SinkWriteError."""
        store = RestKeyValueStore(FakeTransport(json_response({"error": "denied"}, status=401)), BASE_URL)

        with pytest.raises(SinkWriteError):
            await store.set("x", 1)

    @pytest.mark.asyncio
    async def test_when_connection_fails_then_raises_sink_error(self) -> None:
        """Given a connection error, when reading, then SinkError (not a write error)."""
        store = RestKeyValueStore(FakeTransport(aiohttp.ClientConnectionError("down")), BASE_URL)

        with pytest.raises(SinkError) as exc_info:
            await store.get("x")

        assert not isinstance(exc_info.value, SinkWriteError)

    @pytest.mark.asyncio
    async def test_subscribe_polls_and_reports_changes(self) -> None:
        """Given a changing value, when subscribed, then each distinct value is delivered once."""
        values = iter([{"a": 1}, {"a": 1}, {"a": 2}])
        last: dict[str, Any] = {"value": {"a": 2}}

        def handler(spec: RequestSpec):  # type: ignore[no-untyped-def]
            last["value"] = next(values, last["value"])
            return json_response(last["value"])

        transport = FakeTransport()
        transport.handler = handler
        store = RestKeyValueStore(transport, BASE_URL, poll_interval_seconds=0.001)
        seen: list[Any] = []

        unsubscribe = await store.subscribe("stops", seen.append)
        assert seen == [{"a": 1}]
        for _ in range(50):
            if len(seen) == 2:
                break
            await asyncio.sleep(0.005)
        unsubscribe()
        await store.close()

        assert seen == [{"a": 1}, {"a": 2}]
