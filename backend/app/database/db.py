"""
Database connection and initialization.
"""

import aiosqlite
from pathlib import Path
from app.config import settings
from app.logging import get_logger

logger = get_logger('database')


async def init_db(db_path: str | None = None):
    """
    Initialize database with schema.

    :param db_path: Optional override of the configured database file
    :type db_path: str | None
    :return: None
    :rtype: None
    """
    path = Path(db_path or settings.DATABASE_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(path) as db:
        schema_path = Path(__file__).parent / "init_db.sql"
        with open(schema_path) as f:
            await db.executescript(f.read())
        await db.commit()
        logger.info(f"Database initialized at {path}")
