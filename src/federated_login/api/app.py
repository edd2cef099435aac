"""
federated_login.api.app

FastAPI app factory.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Own the shared httpx client used by the directory/exchange clients.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from federated_login import __version__
from federated_login.api.routers.auth import router as auth_router
from federated_login.api.routers.health import router as health_router
from federated_login.observability.logging import configure_logging, get_logger
from federated_login.observability.middleware import RequestContextMiddleware
from federated_login.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name, level=settings.log_level, env=settings.env
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, region=settings.region)
        # One pooled client for both remote services; closed on shutdown.
        app.state.http = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
        try:
            yield
        finally:
            await app.state.http.aclose()
            log.info("shutdown")

    app = FastAPI(
        title="Federated Login",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Business logic stays in `flows`; this file only composes the app.
