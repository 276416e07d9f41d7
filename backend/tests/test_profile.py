"""Tests for birthdate persistence."""

from datetime import date
from unittest.mock import AsyncMock

import aiosqlite
import pytest

from app.services.kv_store import KeyValueStore
from app.services.profile import ProfileService, suggested_birthdate


class TestSuggestedBirthdate:
    def test_thirty_years_back(self):
        assert suggested_birthdate(date(2026, 10, 18)) == date(1996, 10, 18)

    def test_leap_day(self):
        assert suggested_birthdate(date(2024, 2, 29)) == date(1994, 2, 28)


class TestProfileService:
    @pytest.mark.asyncio
    async def test_first_run_needs_birthdate(self, store):
        profile = await ProfileService(store).get_profile(today=date(2026, 10, 18))
        assert profile.birthdate is None
        assert profile.needs_birthdate
        assert profile.suggested_birthdate == date(1996, 10, 18)

    @pytest.mark.asyncio
    async def test_set_and_get(self, store):
        service = ProfileService(store)
        await service.set_birthdate(date(1990, 6, 15), today=date(2026, 10, 18))

        assert await service.get_birthdate() == date(1990, 6, 15)
        assert await store.get("birthdate") == "1990-06-15"
        assert not (await service.get_profile()).needs_birthdate

    @pytest.mark.asyncio
    async def test_future_birthdate_rejected(self, store):
        service = ProfileService(store)
        with pytest.raises(ValueError, match="future"):
            await service.set_birthdate(date(2030, 1, 1), today=date(2026, 10, 18))
        assert await service.get_birthdate() is None

    @pytest.mark.asyncio
    async def test_today_is_allowed(self, store):
        service = ProfileService(store)
        await service.set_birthdate(date(2026, 10, 18), today=date(2026, 10, 18))
        assert await service.get_birthdate() == date(2026, 10, 18)

    @pytest.mark.asyncio
    async def test_full_timestamp_is_accepted(self, store):
        await store.set("birthdate", "1990-06-15T00:00:00.000Z")
        assert await ProfileService(store).get_birthdate() == date(1990, 6, 15)

    @pytest.mark.asyncio
    async def test_garbage_is_treated_as_missing(self, store):
        await store.set("birthdate", "not a date")
        assert await ProfileService(store).get_birthdate() is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["P1Y", "10:30"])
    async def test_non_date_values_are_treated_as_missing(self, store, raw):
        await store.set("birthdate", raw)
        assert await ProfileService(store).get_birthdate() is None

    @pytest.mark.asyncio
    async def test_odd_stored_value_keeps_first_run_prompt(self, store):
        await store.set("birthdate", "P1Y")
        profile = await ProfileService(store).get_profile(today=date(2026, 10, 18))
        assert profile.needs_birthdate

    @pytest.mark.asyncio
    async def test_read_failure_is_treated_as_missing(self, caplog):
        broken = AsyncMock(spec=KeyValueStore)
        broken.get.side_effect = aiosqlite.OperationalError("disk I/O error")

        assert await ProfileService(broken, key="birthdate").get_birthdate() is None
        assert "Failed to read birthdate" in caplog.text
