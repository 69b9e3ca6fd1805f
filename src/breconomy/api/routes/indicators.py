"""Read endpoints for the latest value of each indicator.

Routes follow ``/indicators/{type}[/{window}]``. Responses carry a
``Data-Source`` header telling whether the value came from the cache or
the database fallback.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from breconomy.catalog import INDICATORS, IndicatorDefinition, find_indicator
from breconomy.reader import IndicatorReader

router = APIRouter()


def _not_found(message: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": message})


async def _serve(request: Request, definition: IndicatorDefinition) -> JSONResponse:
    reader: IndicatorReader = request.app.state.reader
    reading = await reader.get_latest(definition)
    if reading is None:
        return _not_found(
            f"{definition.display_name} ({definition.name}) data has not been loaded yet."
        )

    return JSONResponse(
        content={
            "value": float(reading.value),
            "date": reading.reference_date.date().isoformat(),
        },
        headers={"Data-Source": reading.source.value},
    )


@router.get("/indicators")
async def list_indicators() -> JSONResponse:
    """Catalog of the indicators served by this API."""
    return JSONResponse(
        content=[
            {
                "name": d.name,
                "type": d.type,
                "window": d.window,
                "display_name": d.display_name,
                "description": d.description,
                "route": f"/api/v1{d.route}",
            }
            for d in INDICATORS
        ]
    )


@router.get("/indicators/{indicator_type}")
async def get_indicator(request: Request, indicator_type: str) -> JSONResponse:
    definition = find_indicator(indicator_type)
    if definition is None:
        return _not_found(f"Unknown indicator: {indicator_type}")
    return await _serve(request, definition)


@router.get("/indicators/{indicator_type}/{window}")
async def get_indicator_window(
    request: Request, indicator_type: str, window: str
) -> JSONResponse:
    definition = find_indicator(indicator_type, window)
    if definition is None:
        return _not_found(f"Unknown indicator: {indicator_type}/{window}")
    return await _serve(request, definition)
