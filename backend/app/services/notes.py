"""Note store adapter: marker notes keyed by exact instant."""

import json
from datetime import datetime
from typing import Optional

import aiosqlite

from app.config import settings
from app.logging import get_logger
from app.services.kv_store import KeyValueStore
from app.services.markers import to_local

logger = get_logger("services.notes")


def instant_key(instant: datetime) -> str:
    """
    Build the storage key for an instant: UTC ISO-8601 with milliseconds.

    Examples:
        2026-10-18 10:00 Europe/Paris -> "2026-10-18T08:00:00.000Z"
    """
    return to_local(instant).in_tz("UTC").format("YYYY-MM-DDTHH:mm:ss.SSS[Z]")


def _decode_notes(raw: Optional[str]) -> dict[str, str]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Stored notes are not valid JSON, starting empty: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Stored notes are a {type(data).__name__}, not a mapping; starting empty")
        return {}
    return {str(k): v for k, v in data.items() if isinstance(v, str)}


class NoteStore:
    """In-memory note mapping mirrored to the key-value store on every change."""

    def __init__(self, store: KeyValueStore, key: Optional[str] = None):
        self.store = store
        self.key = key or settings.NOTES_STORE_KEY
        self.notes: dict[str, str] = {}

    async def load(self) -> dict[str, str]:
        """
        Load the mapping from the store.

        Missing or corrupt data yields an empty mapping; nothing is raised.

        :return: Copy of the loaded mapping
        :rtype: dict[str, str]
        """
        try:
            raw = await self.store.get(self.key)
        except (aiosqlite.Error, OSError):
            logger.exception("Failed to read notes from store")
            raw = None
        self.notes = _decode_notes(raw)
        logger.info(f"Loaded {len(self.notes)} notes")
        return dict(self.notes)

    async def save(self, mapping: dict[str, str]) -> bool:
        """
        Persist the whole mapping.

        :param mapping: The full note mapping
        :type mapping: dict[str, str]
        :return: True if the write succeeded
        :rtype: bool
        """
        try:
            await self.store.set(self.key, json.dumps(mapping))
        except (aiosqlite.Error, OSError):
            logger.exception("Failed to persist notes")
            return False
        return True

    def get(self, instant: datetime) -> Optional[str]:
        return self.notes.get(instant_key(instant))

    async def put(self, instant: datetime, text: str) -> bool:
        # The local mapping keeps the edit even if the write fails.
        updated = {**self.notes, instant_key(instant): text}
        self.notes = updated
        return await self.save(updated)
