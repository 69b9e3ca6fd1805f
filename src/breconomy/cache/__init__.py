"""Result cache layer -- expiring snapshot cache shared by jobs and endpoints."""

from breconomy.cache.result_cache import MemoryResultCache, ResultCache
from breconomy.cache.snapshot import decode_snapshot, encode_snapshot

__all__ = ["MemoryResultCache", "ResultCache", "decode_snapshot", "encode_snapshot"]
