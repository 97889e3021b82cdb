"""Prometheus scrape endpoint, served outside the ``/api/v1`` prefix."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from ...core.observability import MetricsExporter

LOGGER = logging.getLogger(__name__)

router = APIRouter()

METRICS_PATH = "/metrics"


def get_metrics_exporter(request: Request) -> MetricsExporter:
    return request.app.state.metrics_exporter


@router.get(METRICS_PATH, include_in_schema=False)
def metrics(exporter: MetricsExporter = Depends(get_metrics_exporter)) -> Response:
    """Expose Prometheus metrics."""

    try:
        payload = exporter.render_exposition()
    except Exception as exc:
        LOGGER.exception("Metrics collection failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "metrics_unavailable", "message": str(exc)},
        ) from exc
    return Response(payload, media_type=exporter.content_type)
