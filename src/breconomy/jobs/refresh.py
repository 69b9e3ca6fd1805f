"""Per-indicator refresh job -- fetch, parse, validate, persist, cache.

One job instance runs per configured indicator as a cancellable asyncio task.
A cycle never raises: every failure is logged and the job simply waits the
full update interval before trying again. There is no backoff between
cycles; the next scheduled cycle is the only retry.

Write order inside a cycle is store first, then cache. Store failure skips
the cache write; cache failure is logged and does not undo the store write.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from enum import Enum

import structlog

from breconomy.cache.result_cache import ResultCache
from breconomy.cache.snapshot import encode_snapshot
from breconomy.catalog import RefreshJobConfig
from breconomy.exceptions import (
    EmptySeriesError,
    InvalidDateError,
    InvalidValueError,
    PayloadError,
    StoreError,
    UpstreamError,
)
from breconomy.logging import get_logger
from breconomy.models import CacheSnapshot
from breconomy.parsing import parse_latest_point
from breconomy.source.client import SeriesClient
from breconomy.storage.store import IndicatorStore

logger = get_logger(__name__)


class CycleOutcome(str, Enum):
    """Result of a single refresh cycle."""

    UPDATED = "updated"
    UPSTREAM_ERROR = "upstream_error"
    EMPTY_PAYLOAD = "empty_payload"
    INVALID_PAYLOAD = "invalid_payload"
    INVALID_VALUE = "invalid_value"
    INVALID_DATE = "invalid_date"
    STORE_ERROR = "store_error"
    STOPPED = "stopped"
    UNEXPECTED_ERROR = "unexpected_error"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


async def refresh_once(
    config: RefreshJobConfig,
    client: SeriesClient,
    store: IndicatorStore,
    cache: ResultCache,
    stop: asyncio.Event | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> CycleOutcome:
    """Run one fetch → parse → persist → cache cycle for an indicator.

    Args:
        config: The indicator's job configuration.
        client: Upstream series client.
        store: Durable indicator store.
        cache: Shared result cache.
        stop: When set after the fetch returns, persistence is skipped.
        clock: Source of the "now" timestamp for last_updated/lastVerifiedAt.

    Returns:
        The CycleOutcome describing what happened.
    """
    try:
        payload = await client.fetch_series(config.source_path)
    except UpstreamError as exc:
        logger.error("upstream_fetch_failed", indicator=config.name, error=str(exc))
        return CycleOutcome.UPSTREAM_ERROR
    except PayloadError as exc:
        logger.error("upstream_body_malformed", indicator=config.name, error=str(exc))
        return CycleOutcome.INVALID_PAYLOAD

    if stop is not None and stop.is_set():
        logger.info("refresh_cycle_abandoned", indicator=config.name)
        return CycleOutcome.STOPPED

    try:
        point = parse_latest_point(payload)
    except EmptySeriesError:
        logger.warning("upstream_series_empty", indicator=config.name)
        return CycleOutcome.EMPTY_PAYLOAD
    except InvalidValueError as exc:
        logger.warning("upstream_value_unparsable", indicator=config.name, error=str(exc))
        return CycleOutcome.INVALID_VALUE
    except InvalidDateError as exc:
        logger.error("upstream_date_invalid", indicator=config.name, error=str(exc))
        return CycleOutcome.INVALID_DATE
    except PayloadError as exc:
        logger.error("upstream_payload_invalid", indicator=config.name, error=str(exc))
        return CycleOutcome.INVALID_PAYLOAD

    now = clock()

    try:
        record = await store.upsert(config.name, point.value, point.reference_date, now=now)
    except StoreError as exc:
        logger.error("indicator_store_write_failed", indicator=config.name, error=str(exc))
        return CycleOutcome.STORE_ERROR

    snapshot = CacheSnapshot(
        value=record.value,
        reference_date=record.reference_date,
        last_verified_at=now,
    )
    try:
        await cache.set(config.cache_key, encode_snapshot(snapshot), config.cache_ttl)
    except Exception:
        # Store already holds the fresh value; the read path falls back to it
        logger.warning(
            "indicator_cache_write_failed",
            indicator=config.name,
            cache_key=config.cache_key,
            exc_info=True,
        )
    else:
        logger.debug(
            "indicator_cached",
            indicator=config.name,
            cache_key=config.cache_key,
            ttl_seconds=config.cache_ttl.total_seconds(),
        )

    logger.info(
        "indicator_updated",
        indicator=config.name,
        value=str(point.value),
        reference_date=point.raw_date,
    )
    return CycleOutcome.UPDATED


async def _wait_for_stop(stop: asyncio.Event, delay: timedelta) -> bool:
    """Sleep for ``delay`` unless ``stop`` is set first. Returns True if stopped."""
    if stop.is_set():
        return True
    try:
        await asyncio.wait_for(stop.wait(), timeout=delay.total_seconds())
    except asyncio.TimeoutError:
        return False
    return True


async def run_refresh_job(
    config: RefreshJobConfig,
    client: SeriesClient,
    store: IndicatorStore,
    cache: ResultCache,
    stop: asyncio.Event,
    clock: Callable[[], datetime] = utc_now,
) -> None:
    """Run the refresh loop for one indicator until ``stop`` is set or the task is cancelled.

    Waits ``initial_delay`` first so the host and its dependencies finish
    starting, then runs a cycle every ``update_interval``.
    """
    structlog.contextvars.bind_contextvars(indicator=config.name)
    logger.info(
        "refresh_job_started",
        source_path=config.source_path,
        cache_key=config.cache_key,
        update_interval_seconds=config.update_interval.total_seconds(),
    )

    if await _wait_for_stop(stop, config.initial_delay):
        logger.info("refresh_job_stopped")
        return

    while not stop.is_set():
        try:
            outcome = await refresh_once(config, client, store, cache, stop=stop, clock=clock)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.error("refresh_cycle_unexpected_error", exc_info=True)
            outcome = CycleOutcome.UNEXPECTED_ERROR

        logger.info(
            "next_refresh_scheduled",
            outcome=outcome.value,
            in_seconds=config.update_interval.total_seconds(),
        )
        if await _wait_for_stop(stop, config.update_interval):
            break

    logger.info("refresh_job_stopped")
