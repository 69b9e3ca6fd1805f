"""Refresh scheduler -- owns one background task per indicator.

Jobs share the event loop with the HTTP server. Each job is a single
sequential loop, so cycles for the same indicator never overlap, while jobs
for different indicators run independently of each other.
"""

import asyncio

from breconomy.cache.result_cache import ResultCache
from breconomy.catalog import RefreshJobConfig
from breconomy.jobs.refresh import run_refresh_job
from breconomy.logging import get_logger
from breconomy.source.client import SeriesClient
from breconomy.storage.store import IndicatorStore

logger = get_logger(__name__)


class RefreshScheduler:
    """Starts and stops the refresh jobs for a set of indicators."""

    def __init__(
        self,
        configs: list[RefreshJobConfig],
        client: SeriesClient,
        store: IndicatorStore,
        cache: ResultCache,
    ) -> None:
        self._configs = configs
        self._client = client
        self._store = store
        self._cache = cache
        self._stop = asyncio.Event()
        self._tasks: dict[str, asyncio.Task] = {}  # type: ignore[type-arg]

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks.values())

    @property
    def job_names(self) -> list[str]:
        return list(self._tasks)

    async def start(self) -> None:
        """Launch one task per configured indicator."""
        if self._tasks:
            logger.warning("refresh_scheduler_already_running")
            return
        self._stop.clear()
        for config in self._configs:
            self._tasks[config.name] = asyncio.create_task(
                run_refresh_job(config, self._client, self._store, self._cache, self._stop),
                name=f"refresh:{config.name}",
            )
        logger.info("refresh_scheduler_started", jobs=len(self._tasks))

    async def stop(self, grace_seconds: float = 0.5) -> None:
        """Signal every job to stop and cancel in-flight fetches.

        Sleeping jobs wake on the stop event and exit by themselves; jobs
        still busy after ``grace_seconds`` are cancelled. Returns once all
        tasks have finished.
        """
        if not self._tasks:
            return
        self._stop.set()
        _, pending = await asyncio.wait(self._tasks.values(), timeout=grace_seconds)
        for task in pending:
            task.cancel()
        results = await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        for name, result in zip(self._tasks, results):
            if isinstance(result, Exception):
                logger.error("refresh_job_crashed", indicator=name, error=repr(result))
        self._tasks.clear()
        logger.info("refresh_scheduler_stopped")
