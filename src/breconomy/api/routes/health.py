"""Health endpoint aggregating store, cache and upstream checks."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from breconomy.catalog import INDICATORS
from breconomy.health import run_health_checks

router = APIRouter()

# SELIC doubles as the upstream probe and the watched cache entry
_PROBE_INDICATOR = INDICATORS[0]


@router.get("/health")
async def get_health(request: Request) -> JSONResponse:
    """200 when store, cache and upstream all pass; 503 otherwise."""
    state = request.app.state
    report = await run_health_checks(
        store=state.store,
        cache=state.cache,
        client=state.client,
        upstream_path=_PROBE_INDICATOR.source_path,
        watched_key=_PROBE_INDICATOR.cache_key,
    )
    return JSONResponse(
        status_code=200 if report.healthy else 503,
        content=report.to_dict(),
    )
