"""Metrics middleware for HTTP request instrumentation with trace correlation."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from jobboard_service.infra.metrics.prometheus import (
    http_request_duration_seconds,
    http_requests_total,
)
from jobboard_service.infra.metrics.tracking import current_exemplar

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import Request, Response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request counts and durations per route template.

    Route templates (``/job-posting/public/{id_or_slug}``) keep label
    cardinality low. When a span is active the trace id is attached as an
    exemplar.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        method = request.method
        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response  # type: ignore[no-any-return]
        finally:
            duration = time.perf_counter() - start_time

            endpoint = request.url.path
            route = request.scope.get("route")
            if route is not None and hasattr(route, "path"):
                endpoint = route.path

            exemplar = current_exemplar()
            histogram = http_request_duration_seconds.labels(method=method, endpoint=endpoint)
            counter = http_requests_total.labels(
                method=method, endpoint=endpoint, status=status_code
            )
            if exemplar:
                histogram.observe(duration, exemplar=exemplar)
                counter.inc(exemplar=exemplar)
            else:
                histogram.observe(duration)
                counter.inc()
