"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.dependencies import board_service
from .api.routes import archives, exports, health, preferences, returns, sas, slots, sync
from .config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    provider = app.dependency_overrides.get(board_service, board_service)
    service = provider()
    if settings.remote_sync_enabled and service.start():
        logger.info("Remote board sync started")
    try:
        yield
    finally:
        service.stop()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        root_path="",
        lifespan=lifespan,
    )
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(slots.router, prefix=settings.api_prefix)
    app.include_router(sas.router, prefix=settings.api_prefix)
    app.include_router(returns.router, prefix=settings.api_prefix)
    app.include_router(archives.router, prefix=settings.api_prefix)
    app.include_router(sync.router, prefix=settings.api_prefix)
    app.include_router(exports.router, prefix=settings.api_prefix)
    app.include_router(preferences.router, prefix=settings.api_prefix)
    return app


app = create_app()
