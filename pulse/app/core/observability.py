r"""pulse\app\core\observability.py"""

from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    GCCollector,
    Gauge,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .config import Settings

LOGGER = logging.getLogger(__name__)
ACCESS_LOGGER = logging.getLogger("pulse.access")

REQUEST_ID_HEADER = "X-Request-ID"


def build_registry(
    settings: Settings, uptime: Optional[Callable[[], float]] = None
) -> CollectorRegistry:
    """Create the registry holding the default process/runtime metrics.

    Call once at startup and hand the result to ``MetricsExporter``.  The
    ``uptime`` callable backs ``process_uptime_seconds`` and is evaluated on
    every scrape.
    """

    registry = CollectorRegistry(auto_describe=True)
    if not settings.default_metrics_enabled:
        LOGGER.info("Default metrics disabled; registry starts empty")
        return registry

    namespace = settings.metrics_namespace
    ProcessCollector(namespace=namespace, registry=registry)
    PlatformCollector(registry=registry)
    GCCollector(registry=registry)
    if uptime is not None:
        gauge = Gauge(
            "uptime_seconds",
            "Seconds since the process started serving",
            namespace=namespace,
            subsystem="process",
            registry=registry,
        )
        gauge.set_function(uptime)
    return registry


class MetricsExporter:
    """Render a registry in the Prometheus text exposition format."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry) -> None:
        self.registry = registry

    def render_exposition(self) -> bytes:
        # Read-only: collectors are sampled, nothing is reset.
        return generate_latest(self.registry)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Middleware writing one JSON access log line per request.

    The request id is echoed in ``X-Request-ID`` on every response this
    middleware returns.  When a handler raises, the 500 is produced by
    Starlette's server error handler outside this middleware and carries
    no request id; the access log line still records it.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        method = request.method
        client_ip = request.client.host if request.client else "unknown"
        request_id = (
            request.headers.get("x-request-id")
            or request.headers.get("request-id")
            or str(uuid.uuid4())
        )

        start_perf = time.perf_counter()
        start_wall = time.time()

        def _log(status_code: int) -> None:
            latency = time.perf_counter() - start_perf

            log_payload = {
                "timestamp": datetime.fromtimestamp(
                    start_wall, tz=timezone.utc
                ).isoformat(),
                "path": path,
                "method": method,
                "status": status_code,
                "latency_ms": int(latency * 1000),
                "request_id": request_id,
                "client_ip": client_ip,
            }
            ACCESS_LOGGER.info(json.dumps(log_payload))

        response: Response
        try:
            response = await call_next(request)
        except Exception:
            # Log the failed request, then let the server error handler run.
            _log(500)
            raise

        _log(response.status_code)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
