"""Async SQLite database manager for the indicator store.

Uses aiosqlite for non-blocking database operations with WAL mode so that
refresh job writes do not block API reads. Connections are short-lived: every
store operation opens its own connection and closes it when done, so a
long-running background job never pins a handle.
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from breconomy.logging import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS economic_indicators (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    value TEXT NOT NULL,
    reference_date TEXT NOT NULL,
    last_updated TEXT NOT NULL
);
"""

_CREATE_INDEXES_SQL = """
CREATE UNIQUE INDEX IF NOT EXISTS idx_economic_indicators_name
    ON economic_indicators(name);
"""


class IndicatorDatabase:
    """SQLite connection factory for indicator data.

    Usage:
        database = IndicatorDatabase("data/indicators.db")
        await database.initialize()
        async with database.connection() as db:
            await db.execute("SELECT ...")
    """

    def __init__(self, db_path: str = "data/indicators.db") -> None:
        self._db_path = db_path

    async def initialize(self) -> None:
        """Create the parent directory, set WAL mode, and create the schema.

        Safe to call more than once.
        """
        db_dir = os.path.dirname(self._db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        async with aiosqlite.connect(self._db_path) as db:
            # journal_mode persists in the file; synchronous is per connection
            await db.execute("PRAGMA journal_mode=WAL")
            await db.executescript(_CREATE_TABLES_SQL)
            await db.executescript(_CREATE_INDEXES_SQL)
            await db.commit()
            await self._ensure_schema_version(db)

        logger.info("indicator_db_initialized", db_path=self._db_path)

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a fresh connection for a single unit of work."""
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("PRAGMA synchronous=NORMAL")
            yield db

    async def _ensure_schema_version(self, db: aiosqlite.Connection) -> None:
        """Insert schema version if not already set."""
        cursor = await db.execute("SELECT version FROM schema_version LIMIT 1")
        row = await cursor.fetchone()
        if row is None:
            await db.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            await db.commit()
            logger.info("schema_version_set", version=SCHEMA_VERSION)
