from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from reelscout.infrastructure.config import AppConfig
from reelscout.interfaces.app_state import AppState
from reelscout.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """
    Build the FastAPI application.

    The lifespan hook wires providers, cache and use cases; routers read
    them back from ``app.state``.
    """
    app = FastAPI(
        title=config.app_name,
        description="Multi-source movie search: fan-out aggregation and fallback link resolution.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from reelscout.interfaces.api.catalog.router import router as catalog_router

    app.include_router(catalog_router, prefix="/api/v1")

    @app.get("/healthz", include_in_schema=False)
    async def healthz() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    @app.middleware("http")
    async def log_requests(request: Request, call_next):  # type: ignore[no-untyped-def]
        start = time.perf_counter()
        response = await call_next(request)
        log.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            query=str(request.url.query),
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            client_host=request.client.host if request.client else None,
        )
        return response

    return app
