"""Dependency health checks: store, cache, and upstream API.

Each check runs independently and never raises; the report is healthy only
when all three pass.
"""

import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from breconomy.cache.result_cache import ResultCache
from breconomy.logging import get_logger
from breconomy.source.client import SeriesClient
from breconomy.storage.store import IndicatorStore

logger = get_logger(__name__)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"

CACHE_PROBE_KEY = "health-check-test"
CACHE_PROBE_TTL = timedelta(seconds=10)


@dataclass
class CheckResult:
    """Outcome of a single dependency check."""

    status: str
    response_time_ms: float | None
    message: str
    details: dict[str, Any] | None = None

    @property
    def healthy(self) -> bool:
        return self.status == HEALTHY


@dataclass
class HealthReport:
    """Aggregate of the three dependency checks."""

    database: CheckResult
    cache: CheckResult
    upstream: CheckResult
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    response_time_ms: float = 0.0

    @property
    def healthy(self) -> bool:
        return self.database.healthy and self.cache.healthy and self.upstream.healthy

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": HEALTHY if self.healthy else UNHEALTHY,
            "timestamp": self.timestamp.isoformat(),
            "response_time_ms": self.response_time_ms,
            "services": {
                "database": asdict(self.database),
                "cache": asdict(self.cache),
                "upstream": asdict(self.upstream),
            },
        }


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 1)


async def check_database(store: IndicatorStore) -> CheckResult:
    start = time.monotonic()
    try:
        await store.ping()
        count = await store.count()
    except Exception as exc:
        logger.error("health_database_failed", error=str(exc))
        return CheckResult(UNHEALTHY, None, f"Indicator store unreachable: {exc}")
    return CheckResult(
        HEALTHY,
        _elapsed_ms(start),
        "Indicator store connected",
        {"indicators_count": count},
    )


async def check_cache(cache: ResultCache, watched_key: str | None = None) -> CheckResult:
    """Ping the cache, then write, read back, and compare a probe value."""
    start = time.monotonic()
    probe = datetime.now(timezone.utc).isoformat().encode("utf-8")
    try:
        await cache.ping()
        await cache.set(CACHE_PROBE_KEY, probe, CACHE_PROBE_TTL)
        retrieved = await cache.get(CACHE_PROBE_KEY)
        watched = await cache.get(watched_key) if watched_key else None
    except Exception as exc:
        logger.error("health_cache_failed", error=str(exc))
        return CheckResult(UNHEALTHY, None, f"Cache unreachable: {exc}")

    if retrieved != probe:
        return CheckResult(
            UNHEALTHY, _elapsed_ms(start), "Cache did not return the probe value"
        )

    details: dict[str, Any] = {"can_read_write": True}
    if watched_key:
        details["watched_key"] = watched_key
        details["watched_key_cached"] = watched is not None
    return CheckResult(HEALTHY, _elapsed_ms(start), "Cache read/write OK", details)


async def check_upstream(client: SeriesClient, path: str) -> CheckResult:
    start = time.monotonic()
    try:
        status_code = await client.probe(path)
    except Exception as exc:
        logger.error("health_upstream_failed", error=str(exc))
        return CheckResult(UNHEALTHY, None, f"Upstream API unreachable: {exc}")

    if 200 <= status_code < 300:
        return CheckResult(
            HEALTHY,
            _elapsed_ms(start),
            "Upstream API responding",
            {"status_code": status_code},
        )
    return CheckResult(
        UNHEALTHY,
        _elapsed_ms(start),
        f"Upstream API returned status {status_code}",
        {"status_code": status_code},
    )


async def run_health_checks(
    store: IndicatorStore,
    cache: ResultCache,
    client: SeriesClient,
    upstream_path: str,
    watched_key: str | None = None,
) -> HealthReport:
    start = time.monotonic()
    report = HealthReport(
        database=await check_database(store),
        cache=await check_cache(cache, watched_key),
        upstream=await check_upstream(client, upstream_path),
    )
    report.response_time_ms = _elapsed_ms(start)
    if report.healthy:
        logger.info("health_check_passed")
    else:
        logger.warning(
            "health_check_failed",
            database=report.database.status,
            cache=report.cache.status,
            upstream=report.upstream.status,
        )
    return report
