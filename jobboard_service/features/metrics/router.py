"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics Exposed:
    - http_requests_total / http_request_duration_seconds
    - cache_hits_total / cache_misses_total (cache_name="redis" or "http")
    - cache_operation_duration_seconds
    - cache_tag_invalidations_total / cache_tag_invalidated_keys_total
    - cache_tag_oversized_total
    - errors_total and the retry counters

Histograms and counters carry trace exemplars when a span is active.
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from jobboard_service.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics")
async def metrics() -> Response:
    """Expose Prometheus metrics for scraping."""
    data = generate_latest(REGISTRY)
    return Response(
        content=data,
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
