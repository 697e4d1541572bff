"""FastAPI application for the WebRTC signaling relay."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from . import __version__
from .core.config import settings
from .routers import signaling as signaling_router
from .schemas.signaling import HealthResponse
from .services.signaling import manager as signaling_manager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info("Signaling relay starting (env=%s, default room=%s)", settings.app_env, settings.default_room)
    if settings.enable_auth:
        logger.info("Authentication is enabled (username: %s)", settings.auth_username)
    yield
    logger.info("Signaling relay shutting down with %d live connections", len(signaling_manager.registry))


app = FastAPI(title="Signal Relay", version=__version__, lifespan=lifespan)

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(signaling_router.router)


def _health() -> HealthResponse:
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())


@app.get("/health", response_model=HealthResponse, tags=["meta"])
async def health() -> HealthResponse:
    """Simple liveness probe."""

    return _health()


@app.get("/api/health", response_model=HealthResponse, tags=["meta"])
async def api_health() -> HealthResponse:
    return _health()


@app.head("/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)
