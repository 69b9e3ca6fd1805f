"""Cache-aside read path for a single indicator.

Reads the result cache first; on a miss (or a cache outage) falls back to the
store and, when the store has the record, writes it back to the cache so the
next read takes the fast path. The write-back is best effort and never fails
the read.
"""

from datetime import timedelta

from breconomy.cache.result_cache import ResultCache
from breconomy.cache.snapshot import decode_snapshot, encode_snapshot
from breconomy.catalog import IndicatorDefinition
from breconomy.exceptions import PayloadError
from breconomy.logging import get_logger
from breconomy.models import CacheSnapshot, DataSource, IndicatorReading, IndicatorRecord
from breconomy.storage.store import IndicatorStore

logger = get_logger(__name__)


class IndicatorReader:
    """Serves the latest reading of an indicator, cache first."""

    def __init__(
        self,
        store: IndicatorStore,
        cache: ResultCache,
        heal_ttl: timedelta = timedelta(hours=1),
    ) -> None:
        self._store = store
        self._cache = cache
        self._heal_ttl = heal_ttl

    async def get_latest(self, definition: IndicatorDefinition) -> IndicatorReading | None:
        """Return the latest reading, or None when nothing was fetched yet.

        StoreError propagates: with both tiers unavailable there is nothing
        to serve.
        """
        snapshot = await self._read_cache(definition)
        if snapshot is not None:
            return IndicatorReading(
                value=snapshot.value,
                reference_date=snapshot.reference_date,
                source=DataSource.CACHE,
            )

        record = await self._store.find_by_name(definition.name)
        if record is None:
            logger.info("indicator_not_loaded", indicator=definition.name)
            return None

        await self._heal_cache(definition, record)
        return IndicatorReading(
            value=record.value,
            reference_date=record.reference_date,
            source=DataSource.DATABASE,
        )

    async def _read_cache(self, definition: IndicatorDefinition) -> CacheSnapshot | None:
        try:
            raw = await self._cache.get(definition.cache_key)
        except Exception:
            logger.warning(
                "indicator_cache_read_failed",
                indicator=definition.name,
                cache_key=definition.cache_key,
                exc_info=True,
            )
            return None

        if not raw:
            return None

        try:
            return decode_snapshot(raw)
        except PayloadError as exc:
            logger.warning(
                "indicator_cache_entry_corrupt",
                indicator=definition.name,
                cache_key=definition.cache_key,
                error=str(exc),
            )
            return None

    async def _heal_cache(
        self, definition: IndicatorDefinition, record: IndicatorRecord
    ) -> None:
        snapshot = CacheSnapshot(
            value=record.value,
            reference_date=record.reference_date,
            last_verified_at=record.last_updated,
        )
        try:
            await self._cache.set(definition.cache_key, encode_snapshot(snapshot), self._heal_ttl)
        except Exception:
            logger.warning(
                "indicator_cache_heal_failed",
                indicator=definition.name,
                cache_key=definition.cache_key,
                exc_info=True,
            )
        else:
            logger.debug("indicator_cache_healed", indicator=definition.name)
