"""Entry point for the BrEconomy indicators service.

Wires all components together and serves the FastAPI app with uvicorn. The
refresh jobs and the HTTP server share a single asyncio event loop; the
FastAPI lifespan starts the jobs on startup and stops them on shutdown.

Component wiring order (in build_components):
1. AppSettings (configuration)
2. Logging setup
3. IndicatorDatabase + IndicatorStore (durable latest values)
4. MemoryResultCache (shared snapshot cache)
5. BcbClient (upstream SGS API)
6. IndicatorReader (cache-aside read path)
7. RefreshScheduler (one refresh job per catalog indicator)

uvicorn installs the SIGINT/SIGTERM handlers; on either signal the lifespan
exit path stops every refresh job before the process ends.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any

import uvicorn
from fastapi import FastAPI

from breconomy.api.app import create_app
from breconomy.cache.result_cache import MemoryResultCache
from breconomy.catalog import INDICATORS, build_job_configs
from breconomy.config import AppSettings
from breconomy.jobs.scheduler import RefreshScheduler
from breconomy.logging import get_logger, setup_logging
from breconomy.reader import IndicatorReader
from breconomy.source.bcb_client import BcbClient
from breconomy.storage.database import IndicatorDatabase
from breconomy.storage.store import IndicatorStore


def build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all service components from settings.

    Does NOT open the database or the HTTP client -- that happens in the
    lifespan.

    Args:
        settings: Application-wide settings.

    Returns:
        Dict mapping component names to instances.
    """
    database = IndicatorDatabase(settings.database.path)
    store = IndicatorStore(database)
    cache = MemoryResultCache()
    client = BcbClient(settings.upstream)
    reader = IndicatorReader(
        store,
        cache,
        heal_ttl=timedelta(seconds=settings.cache.default_ttl_seconds),
    )
    scheduler = RefreshScheduler(
        build_job_configs(settings.refresh, INDICATORS),
        client=client,
        store=store,
        cache=cache,
    )
    return {
        "database": database,
        "store": store,
        "cache": cache,
        "client": client,
        "reader": reader,
        "scheduler": scheduler,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage component lifecycle within the FastAPI application.

    On startup: exposes components on app.state, initializes the schema,
    opens the upstream client and starts the refresh jobs.

    On shutdown: stops every refresh job, then closes the client.
    """
    logger = get_logger("breconomy.main")
    settings: AppSettings = app.state.settings
    components = app.state.components

    app.state.store = components["store"]
    app.state.cache = components["cache"]
    app.state.client = components["client"]
    app.state.reader = components["reader"]

    await components["database"].initialize()
    await components["client"].connect()

    scheduler: RefreshScheduler = components["scheduler"]
    if settings.refresh.enabled:
        await scheduler.start()
    else:
        logger.warning("refresh_jobs_disabled")

    logger.info("lifespan_started", indicators=len(INDICATORS))

    try:
        yield
    finally:
        await scheduler.stop()
        await components["client"].close()
        logger.info("breconomy_stopped")


async def run() -> None:
    """Run the indicators service until uvicorn receives a shutdown signal."""
    # 1. Load settings
    settings = AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("breconomy.main")

    # 3-7. Build all components
    components = build_components(settings)

    app = create_app(lifespan=lifespan)
    app.state.settings = settings
    app.state.components = components

    logger.info(
        "starting_api",
        host=settings.api.host,
        port=settings.api.port,
        update_interval_hours=settings.refresh.update_interval_hours,
    )

    config = uvicorn.Config(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
