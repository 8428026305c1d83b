"""Tests for the in-memory key-value store."""

from typing import Any

import pytest

from gbg_feeds.adapters.sinks import InMemoryKeyValueStore


class TestInMemoryKeyValueStore:
    """Tests for InMemoryKeyValueStore."""

    @pytest.mark.asyncio
    async def test_set_then_get_nested_path(self) -> None:
        """Given a value set at a nested path, when reading parents, then the tree is built."""
        store = InMemoryKeyValueStore()

        await store.set("vasttrafik/departures/chalmers", {"stop": {"id": "1"}})

        assert await store.get("vasttrafik/departures/chalmers/stop/id") == "1"
        assert await store.get("vasttrafik") == {"departures": {"chalmers": {"stop": {"id": "1"}}}}

    @pytest.mark.asyncio
    async def test_get_missing_path_returns_none(self) -> None:
        """Given an empty store, when reading, then None."""
        assert await InMemoryKeyValueStore().get("nothing/here") is None

    @pytest.mark.asyncio
    async def test_set_none_deletes_and_prunes_empty_parents(self) -> None:
        """Given a single leaf, when deleting it, then empty parents disappear too."""
        store = InMemoryKeyValueStore({"a": {"b": {"c": 1}}, "keep": True})

        await store.set("a/b/c", None)

        assert await store.get("") == {"keep": True}

    @pytest.mark.asyncio
    async def test_update_replaces_only_given_children(self) -> None:
        """Given existing children, when updating some, then the others are kept."""
        store = InMemoryKeyValueStore({"school": {"name": "Old", "id": 1}})

        await store.update("school", {"name": "New", "extra/nested": "x"})

        assert await store.get("school") == {"name": "New", "id": 1, "extra": {"nested": "x"}}

    @pytest.mark.asyncio
    async def test_push_generates_unique_keys(self) -> None:
        """Given two pushes, when reading the list, then both values are stored under new keys."""
        store = InMemoryKeyValueStore()

        first = await store.push("log", "a")
        second = await store.push("log", "b")

        assert first != second
        assert await store.get("log") == {first: "a", second: "b"}

    @pytest.mark.asyncio
    async def test_values_are_copied(self) -> None:
        """Given a stored dict, when the caller mutates its copy, then the store is unchanged."""
        store = InMemoryKeyValueStore()
        value = {"list": [1, 2]}
        await store.set("x", value)

        value["list"].append(3)
        read = await store.get("x")
        read["list"].append(4)

        assert await store.get("x") == {"list": [1, 2]}

    @pytest.mark.asyncio
    async def test_subscribe_delivers_current_value_and_changes_only(self) -> None:
        """Given a subscription, when related paths change, then only real changes are delivered."""
        store = InMemoryKeyValueStore({"stops": {"a": {"id": "1"}}})
        seen: list[Any] = []

        unsubscribe = await store.subscribe("stops", seen.append)
        await store.set("stops/b", {"id": "2"})
        await store.set("stops/b", {"id": "2"})
        await store.set("other", 1)
        unsubscribe()
        await store.set("stops/c", {"id": "3"})

        assert seen == [
            {"a": {"id": "1"}},
            {"a": {"id": "1"}, "b": {"id": "2"}},
        ]

    @pytest.mark.asyncio
    async def test_subscribe_to_missing_path_delivers_none(self) -> None:
        """Given nothing stored, when subscribing, then None is delivered first."""
        seen: list[Any] = []

        await InMemoryKeyValueStore().subscribe("stops", seen.append)

        assert seen == [None]

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_break_writes(self) -> None:
        """Given a subscriber that raises, when writing, then the write still succeeds."""
        store = InMemoryKeyValueStore()

        def explode(value: Any) -> None:
            if value is not None:
                raise RuntimeError("boom")

        await store.subscribe("x", explode)
        await store.set("x", 1)

        assert await store.get("x") == 1
