"""Typed SQLite read/write abstraction for the latest indicator readings.

Provides IndicatorStore with upsert-by-name and find-by-name. All SQL is
isolated behind this interface.

CRITICAL: values are stored as TEXT in SQLite and restored as Decimal on read.
Timestamps are stored as ISO-8601 strings in UTC.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import aiosqlite

from breconomy.exceptions import StoreError
from breconomy.logging import get_logger
from breconomy.models import IndicatorRecord
from breconomy.storage.database import IndicatorDatabase

logger = get_logger(__name__)

_SELECT_BY_NAME_SQL = (
    "SELECT id, name, value, reference_date, last_updated "
    "FROM economic_indicators WHERE name = ?"
)


def _to_utc_midnight(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def _row_to_record(row: tuple) -> IndicatorRecord:
    return IndicatorRecord(
        id=row[0],
        name=row[1],
        value=Decimal(row[2]),
        reference_date=datetime.fromisoformat(row[3]),
        last_updated=datetime.fromisoformat(row[4]),
    )


class IndicatorStore:
    """Durable mapping from indicator name to its latest reading.

    Every method opens a short-lived connection through the database and
    wraps driver errors into StoreError.

    Usage:
        store = IndicatorStore(database)
        record = await store.upsert("SELIC", Decimal("11.25"), reference_date)
    """

    def __init__(self, database: IndicatorDatabase) -> None:
        self._database = database

    # ──────────────────────────────────────────────
    # Write methods
    # ──────────────────────────────────────────────

    async def upsert(
        self,
        name: str,
        value: Decimal,
        reference_date: datetime,
        now: datetime | None = None,
    ) -> IndicatorRecord:
        """Create the record for ``name`` or update it in place.

        The id of an existing record is preserved. ``reference_date`` is
        normalized to UTC midnight and ``last_updated`` set to ``now``.
        """
        now = now or datetime.now(timezone.utc)
        reference_date = _to_utc_midnight(reference_date)

        try:
            async with self._database.connection() as db:
                await db.execute(
                    "INSERT INTO economic_indicators "
                    "(id, name, value, reference_date, last_updated) "
                    "VALUES (?, ?, ?, ?, ?) "
                    "ON CONFLICT(name) DO UPDATE SET "
                    "value = excluded.value, "
                    "reference_date = excluded.reference_date, "
                    "last_updated = excluded.last_updated",
                    (
                        str(uuid.uuid4()),
                        name,
                        str(value),
                        reference_date.isoformat(),
                        now.isoformat(),
                    ),
                )
                await db.commit()
                cursor = await db.execute(_SELECT_BY_NAME_SQL, (name,))
                row = await cursor.fetchone()
        except (aiosqlite.Error, OSError) as exc:
            raise StoreError(f"failed to upsert indicator {name}: {exc}") from exc

        if row is None:
            raise StoreError(f"indicator {name} missing right after upsert")

        logger.debug("indicator_upserted", indicator=name, value=str(value))
        return _row_to_record(row)

    # ──────────────────────────────────────────────
    # Read methods
    # ──────────────────────────────────────────────

    async def find_by_name(self, name: str) -> IndicatorRecord | None:
        """Return the record for ``name`` or None if it was never fetched."""
        try:
            async with self._database.connection() as db:
                cursor = await db.execute(_SELECT_BY_NAME_SQL, (name,))
                row = await cursor.fetchone()
        except (aiosqlite.Error, OSError) as exc:
            raise StoreError(f"failed to read indicator {name}: {exc}") from exc

        if row is None:
            return None
        return _row_to_record(row)

    async def count(self) -> int:
        """Return the number of indicators with at least one stored reading."""
        try:
            async with self._database.connection() as db:
                cursor = await db.execute("SELECT COUNT(*) FROM economic_indicators")
                row = await cursor.fetchone()
        except (aiosqlite.Error, OSError) as exc:
            raise StoreError(f"failed to count indicators: {exc}") from exc
        return int(row[0]) if row else 0

    async def ping(self) -> None:
        """Round-trip a trivial query; raises StoreError when unreachable."""
        try:
            async with self._database.connection() as db:
                await db.execute("SELECT 1")
        except (aiosqlite.Error, OSError) as exc:
            raise StoreError(f"indicator store unreachable: {exc}") from exc
