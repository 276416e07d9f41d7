"""Tests for the note store adapter and the key-value store beneath it."""

import json
from unittest.mock import AsyncMock

import aiosqlite
import pendulum
import pytest

from app.services.kv_store import KeyValueStore
from app.services.notes import NoteStore, instant_key


# ============================================================
# Keys
# ============================================================


class TestInstantKey:
    def test_utc_with_milliseconds(self):
        instant = pendulum.datetime(2026, 10, 18, 10, 0, tz="UTC")
        assert instant_key(instant) == "2026-10-18T10:00:00.000Z"

    def test_offset_instants_normalize_to_utc(self):
        instant = pendulum.datetime(2026, 10, 18, 10, 0, tz="Europe/Paris")
        assert instant_key(instant) == "2026-10-18T08:00:00.000Z"

    def test_same_instant_same_key(self):
        utc = pendulum.datetime(2026, 1, 1, 12, tz="UTC")
        assert instant_key(utc) == instant_key(utc.in_tz("Asia/Tokyo"))


# ============================================================
# Key-value store
# ============================================================


class TestKeyValueStore:
    @pytest.mark.asyncio
    async def test_missing_key(self, store):
        assert await store.get("nothing") is None

    @pytest.mark.asyncio
    async def test_set_overwrites(self, store):
        await store.set("k", "one")
        await store.set("k", "two")
        assert await store.get("k") == "two"


# ============================================================
# Note store
# ============================================================


class TestNoteStore:
    @pytest.mark.asyncio
    async def test_round_trip_through_reload(self, store):
        instant = pendulum.datetime(2008, 6, 1, 9, tz="UTC")
        notes = NoteStore(store)
        await notes.load()
        assert await notes.put(instant, "Graduated")

        reloaded = await NoteStore(store).load()
        assert reloaded[instant_key(instant)] == "Graduated"

    @pytest.mark.asyncio
    async def test_put_merges_and_persists_whole_mapping(self, store):
        first = pendulum.datetime(2008, 6, 1, tz="UTC")
        second = pendulum.datetime(2012, 9, 1, tz="UTC")
        notes = NoteStore(store)
        await notes.load()
        await notes.put(first, "Graduated")
        await notes.put(second, "Moved")
        await notes.put(first, "Graduated with honours")

        stored = json.loads(await store.get("events"))
        assert stored == {
            instant_key(first): "Graduated with honours",
            instant_key(second): "Moved",
        }

    @pytest.mark.asyncio
    async def test_nothing_stored_loads_empty(self, store):
        assert await NoteStore(store).load() == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["{not json", "[1, 2, 3]", '"text"', "null"])
    async def test_corrupt_data_loads_empty(self, store, raw):
        await store.set("events", raw)
        assert await NoteStore(store).load() == {}

    @pytest.mark.asyncio
    async def test_non_string_values_are_dropped(self, store):
        await store.set("events", json.dumps({"a": "kept", "b": 3}))
        assert await NoteStore(store).load() == {"a": "kept"}

    @pytest.mark.asyncio
    async def test_read_failure_loads_empty(self):
        broken = AsyncMock(spec=KeyValueStore)
        broken.get.side_effect = aiosqlite.OperationalError("disk I/O error")
        assert await NoteStore(broken, key="events").load() == {}

    @pytest.mark.asyncio
    async def test_write_failure_keeps_local_edit(self, caplog):
        broken = AsyncMock(spec=KeyValueStore)
        broken.get.return_value = None
        broken.set.side_effect = aiosqlite.OperationalError("database is locked")
        notes = NoteStore(broken, key="events")
        await notes.load()

        instant = pendulum.datetime(2020, 3, 1, tz="UTC")
        assert await notes.put(instant, "Lockdown") is False
        assert notes.get(instant) == "Lockdown"
        assert "Failed to persist notes" in caplog.text

    @pytest.mark.asyncio
    async def test_custom_store_key(self, store):
        notes = NoteStore(store, key="journal")
        await notes.load()
        await notes.put(pendulum.datetime(2020, 1, 1, tz="UTC"), "x")
        assert await store.get("journal") is not None
        assert await store.get("events") is None
