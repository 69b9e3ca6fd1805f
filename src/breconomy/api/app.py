"""FastAPI application factory for the indicators read API."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from breconomy.api.routes import health, indicators
from breconomy.exceptions import IndicatorServiceError
from breconomy.logging import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error. Please try again later."


async def _service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the fault and answer with a generic 500; internals never leak."""
    logger.error(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"message": GENERIC_ERROR_MESSAGE})


def create_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to inject startup/shutdown logic.

    Returns:
        Configured FastAPI application. Route handlers expect ``reader``,
        ``store``, ``cache`` and ``client`` on ``app.state``.
    """
    app = FastAPI(
        title="BrEconomy Indicators API",
        lifespan=lifespan,
    )

    app.add_exception_handler(IndicatorServiceError, _service_error_handler)
    app.add_exception_handler(Exception, _service_error_handler)

    app.include_router(indicators.router, prefix="/api/v1")
    app.include_router(health.router, prefix="/api")

    return app
