"""Async string key-value store backed by SQLite."""

from datetime import datetime, timezone

import aiosqlite

from app.logging import get_logger

logger = get_logger("services.kv_store")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class KeyValueStore:
    """Opaque get/set string store used for the birthdate and the note mapping."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def _get_db(self) -> aiosqlite.Connection:
        db = await aiosqlite.connect(self.db_path)
        db.row_factory = aiosqlite.Row
        return db

    async def get(self, key: str) -> str | None:
        db = await self._get_db()
        try:
            cursor = await db.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = await cursor.fetchone()
            return str(row["value"]) if row else None
        finally:
            await db.close()

    async def set(self, key: str, value: str) -> None:
        db = await self._get_db()
        try:
            await db.execute(
                """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at""",
                (key, value, _now()),
            )
            await db.commit()
        finally:
            await db.close()
        logger.debug(f"Stored key '{key}' ({len(value)} chars)")

