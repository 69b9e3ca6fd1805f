"""Tests for MemoryResultCache and the snapshot codec."""

import asyncio
import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from breconomy.cache.result_cache import MemoryResultCache
from breconomy.cache.snapshot import decode_snapshot, encode_snapshot
from breconomy.exceptions import PayloadError
from breconomy.models import CacheSnapshot


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timed_cache(fake_clock: FakeClock) -> MemoryResultCache:
    return MemoryResultCache(clock=fake_clock)


class TestMemoryResultCache:
    @pytest.mark.asyncio
    async def test_set_and_get(self, timed_cache: MemoryResultCache) -> None:
        await timed_cache.set("indicador:selic", b"payload", timedelta(hours=1))
        assert await timed_cache.get("indicador:selic") == b"payload"

    @pytest.mark.asyncio
    async def test_missing_key_returns_none(self, timed_cache: MemoryResultCache) -> None:
        assert await timed_cache.get("indicador:selic") is None

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(
        self, timed_cache: MemoryResultCache, fake_clock: FakeClock
    ) -> None:
        await timed_cache.set("k", b"v", timedelta(seconds=10))
        fake_clock.now += 9
        assert await timed_cache.get("k") == b"v"
        fake_clock.now += 1
        assert await timed_cache.get("k") is None

    @pytest.mark.asyncio
    async def test_overwrite_resets_ttl(
        self, timed_cache: MemoryResultCache, fake_clock: FakeClock
    ) -> None:
        await timed_cache.set("k", b"old", timedelta(seconds=10))
        fake_clock.now += 8
        await timed_cache.set("k", b"new", timedelta(seconds=10))
        fake_clock.now += 8
        assert await timed_cache.get("k") == b"new"

    @pytest.mark.asyncio
    async def test_delete(self, timed_cache: MemoryResultCache) -> None:
        await timed_cache.set("k", b"v", timedelta(seconds=10))
        await timed_cache.delete("k")
        await timed_cache.delete("never-set")
        assert await timed_cache.get("k") is None

    @pytest.mark.asyncio
    async def test_write_drops_expired_entries(
        self, timed_cache: MemoryResultCache, fake_clock: FakeClock
    ) -> None:
        await timed_cache.set("a", b"1", timedelta(seconds=5))
        await timed_cache.set("b", b"2", timedelta(seconds=50))
        fake_clock.now += 10
        await timed_cache.set("c", b"3", timedelta(seconds=50))
        assert set(timed_cache._entries) == {"b", "c"}

    @pytest.mark.asyncio
    async def test_ping_succeeds(self, timed_cache: MemoryResultCache) -> None:
        assert await timed_cache.ping() is None

    @pytest.mark.asyncio
    async def test_non_positive_ttl_rejected(self, timed_cache: MemoryResultCache) -> None:
        with pytest.raises(ValueError):
            await timed_cache.set("k", b"v", timedelta(0))

    @pytest.mark.asyncio
    async def test_concurrent_writers_on_different_keys(self) -> None:
        cache = MemoryResultCache()
        keys = [f"indicador:{i}" for i in range(50)]
        await asyncio.gather(
            *(cache.set(k, k.encode(), timedelta(minutes=1)) for k in keys)
        )
        values = await asyncio.gather(*(cache.get(k) for k in keys))
        assert values == [k.encode() for k in keys]


class TestSnapshotCodec:
    def test_wire_format(self) -> None:
        snapshot = CacheSnapshot(
            value=Decimal("11.25"),
            reference_date=datetime(2026, 1, 27, tzinfo=timezone.utc),
            last_verified_at=datetime(2026, 1, 28, 9, 30, tzinfo=timezone.utc),
        )
        data = json.loads(encode_snapshot(snapshot))
        assert data == {
            "value": 11.25,
            "date": "27/01/2026",
            "lastVerifiedAt": "2026-01-28T09:30:00+00:00",
        }

    def test_decode_restores_snapshot(self) -> None:
        snapshot = CacheSnapshot(
            value=Decimal("0.045513"),
            reference_date=datetime(2024, 2, 29, tzinfo=timezone.utc),
            last_verified_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
        )
        assert decode_snapshot(encode_snapshot(snapshot)) == snapshot

    def test_decoded_number_is_exact_decimal(self) -> None:
        raw = b'{"value": 5.4310, "date": "27/01/2026", "lastVerifiedAt": "2026-01-28T00:00:00+00:00"}'
        value = decode_snapshot(raw).value
        assert isinstance(value, Decimal)
        assert str(value) == "5.4310"

    @pytest.mark.parametrize(
        "raw",
        [
            b"not json",
            b"[]",
            b'{"value": 11.25, "date": "27/01/2026"}',
            b'{"value": "abc", "date": "27/01/2026", "lastVerifiedAt": "2026-01-28T00:00:00+00:00"}',
            b'{"value": "11.25", "date": "27/01/2026", "lastVerifiedAt": "2026-01-28T00:00:00+00:00"}',
            b'{"value": NaN, "date": "27/01/2026", "lastVerifiedAt": "2026-01-28T00:00:00+00:00"}',
            b'{"value": 11.25, "date": "2026-01-27", "lastVerifiedAt": "2026-01-28T00:00:00+00:00"}',
            b"\xff\xfe",
        ],
    )
    def test_decode_rejects_malformed(self, raw: bytes) -> None:
        with pytest.raises(PayloadError):
            decode_snapshot(raw)
