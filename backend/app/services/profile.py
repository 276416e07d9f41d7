"""Birthdate persistence and the first-run prompt."""

from datetime import date
from typing import Optional

import aiosqlite
import pendulum

from app.config import settings
from app.logging import get_logger
from app.models import Profile
from app.services.kv_store import KeyValueStore

logger = get_logger("services.profile")


def _today() -> date:
    return pendulum.today("local").date()


def suggested_birthdate(today: Optional[date] = None) -> date:
    """Pre-fill value for the birthdate prompt."""
    today = today or _today()
    return pendulum.date(today.year, today.month, today.day).subtract(
        years=settings.SUGGESTED_AGE_YEARS
    )


class ProfileService:
    """Reads and writes the user's birthdate."""

    def __init__(self, store: KeyValueStore, key: Optional[str] = None):
        self.store = store
        self.key = key or settings.BIRTHDATE_STORE_KEY

    async def get_birthdate(self) -> date | None:
        """
        Read the stored birthdate.

        Anything that is not a date or a timestamp counts as unset.

        :return: The birthdate, or None when missing or unreadable
        :rtype: date | None
        """
        try:
            raw = await self.store.get(self.key)
        except (aiosqlite.Error, OSError):
            logger.exception("Failed to read birthdate from store")
            return None
        if not raw:
            return None
        try:
            parsed = pendulum.parse(raw, exact=True)
        except ValueError:
            parsed = None
        if isinstance(parsed, pendulum.DateTime):
            return parsed.date()
        if isinstance(parsed, pendulum.Date):
            return parsed
        logger.warning(f"Ignoring unparseable stored birthdate: {raw!r}")
        return None

    async def set_birthdate(self, birthdate: date, today: Optional[date] = None) -> date:
        today = today or _today()
        if birthdate > today:
            raise ValueError("Birthdate cannot be in the future")
        await self.store.set(self.key, birthdate.isoformat())
        logger.info(f"Birthdate set to {birthdate.isoformat()}")
        return birthdate

    async def get_profile(self, today: Optional[date] = None) -> Profile:
        birthdate = await self.get_birthdate()
        return Profile(
            birthdate=birthdate,
            needs_birthdate=birthdate is None,
            suggested_birthdate=suggested_birthdate(today),
        )
