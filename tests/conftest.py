"""Shared test fixtures for the indicators service."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from breconomy.cache.result_cache import MemoryResultCache
from breconomy.catalog import RefreshJobConfig
from breconomy.config import AppSettings, DatabaseSettings, RefreshSettings
from breconomy.source.client import SeriesClient
from breconomy.storage.database import IndicatorDatabase
from breconomy.storage.store import IndicatorStore

FIXED_NOW = datetime(2026, 1, 28, 9, 30, tzinfo=timezone.utc)

SELIC_PAYLOAD = [{"data": "27/01/2026", "valor": "11.25"}]


@pytest.fixture
def mock_settings(tmp_path) -> AppSettings:
    """Return AppSettings with test defaults (temporary database, fast schedule)."""
    return AppSettings(
        log_level="DEBUG",
        database=DatabaseSettings(path=str(tmp_path / "indicators.db")),
        refresh=RefreshSettings(update_interval_hours=24, initial_delay_seconds=0),
    )


@pytest_asyncio.fixture
async def database(tmp_path) -> IndicatorDatabase:
    """Initialized SQLite database in a temporary directory."""
    db = IndicatorDatabase(str(tmp_path / "data" / "indicators.db"))
    await db.initialize()
    return db


@pytest_asyncio.fixture
async def store(database: IndicatorDatabase) -> IndicatorStore:
    return IndicatorStore(database)


@pytest.fixture
def cache() -> MemoryResultCache:
    return MemoryResultCache()


@pytest.fixture
def mock_client() -> AsyncMock:
    """Mock SeriesClient returning a single SELIC point."""
    client = AsyncMock(spec=SeriesClient)
    client.fetch_series.return_value = SELIC_PAYLOAD
    client.probe.return_value = 200
    return client


@pytest.fixture
def selic_config() -> RefreshJobConfig:
    return RefreshJobConfig(
        name="SELIC",
        source_path="dados/serie/bcdata.sgs.432/dados/ultimos/1?formato=json",
        cache_key="indicador:selic",
        update_interval=timedelta(hours=24),
        initial_delay=timedelta(0),
    )


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    """Deterministic clock for last_updated / lastVerifiedAt."""
    return fixed_clock
