r"""pulse\app\main.py

Main entrypoint for the FastAPI application.

The API exposes a liveness endpoint at ``/api/v1`` and Prometheus metrics
at ``/metrics``.  Configuration is read from environment variables (see
``core.config``).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CollectorRegistry

from .api.v1 import health, metrics
from .core.config import Settings, get_settings
from .core.observability import MetricsExporter, RequestLogMiddleware, build_registry
from .services.status_service import StatusReporter

LOGGER = logging.getLogger(__name__)

# Each router declares its full path; there is no global prefix.
ROUTERS = (health.router, metrics.router)


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[CollectorRegistry] = None,
) -> FastAPI:
    """Build the application with one status reporter and one metrics exporter."""

    settings = settings or get_settings()
    reporter = StatusReporter()
    if registry is None:
        registry = build_registry(settings, uptime=reporter.uptime)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        LOGGER.info(
            "Application is running on: http://localhost:%s%s",
            settings.port,
            health.HEALTH_PATH,
        )
        LOGGER.info(
            "Metrics is running on: http://localhost:%s%s",
            settings.port,
            metrics.METRICS_PATH,
        )
        yield

    app = FastAPI(title="Pulse API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.status_reporter = reporter
    app.state.metrics_exporter = MetricsExporter(registry)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Added last so it wraps CORS and also sees preflight requests.
    app.add_middleware(RequestLogMiddleware)

    for router in ROUTERS:
        app.include_router(router)
    return app


def run() -> None:
    """Configure logging and serve the application with uvicorn."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # uvicorn exits the process itself when the port cannot be bound.
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
