"""Helper functions for tracking operational metrics."""

from __future__ import annotations

import logging
from typing import Any

from opentelemetry import trace

from jobboard_service.infra.metrics import business
from jobboard_service.infra.metrics.prometheus import (
    cache_hits_total,
    cache_misses_total,
    cache_operation_duration_seconds,
    cache_tag_invalidated_keys_total,
    cache_tag_invalidations_total,
    cache_tag_oversized_total,
)

logger = logging.getLogger(__name__)


def current_exemplar() -> dict[str, str] | None:
    """Return a trace_id exemplar when a valid span is active."""
    span = trace.get_current_span()
    if span and span.get_span_context().is_valid:
        return {"trace_id": format(span.get_span_context().trace_id, "032x")}
    return None


def tag_family(tag: str) -> str:
    """Collapse a tag to a low-cardinality label.

    Tags end in entity ids (``idx|jobs|recruiter|list|R1``); the label keeps
    the leading namespace segments only.
    """
    parts = tag.split("|")
    return "|".join(parts[:4])


# ============================================================================
# Error Tracking
# ============================================================================


def track_error(
    error_type: str,
    endpoint: str,
    status_code: int,
    extra: dict[str, Any] | None = None,
) -> None:
    """Track an error occurrence.

    Example:
        track_error("not_found", "/job-posting/public/42", 404)
    """
    business.errors_total.labels(
        error_type=error_type,
        endpoint=endpoint,
        status_code=str(status_code),
    ).inc()

    logger.debug(
        f"Tracked error: {error_type}",
        extra={"endpoint": endpoint, "status_code": status_code, **(extra or {})},
    )


# ============================================================================
# Cache Tracking
# ============================================================================


def track_cache_lookup(cache_name: str, hit: bool) -> None:
    counter = cache_hits_total if hit else cache_misses_total
    exemplar = current_exemplar()
    if exemplar:
        counter.labels(cache_name=cache_name).inc(exemplar=exemplar)
    else:
        counter.labels(cache_name=cache_name).inc()


def track_cache_operation(operation: str, duration: float, cache_name: str = "redis") -> None:
    histogram = cache_operation_duration_seconds.labels(operation=operation, cache_name=cache_name)
    exemplar = current_exemplar()
    if exemplar:
        histogram.observe(duration, exemplar=exemplar)
    else:
        histogram.observe(duration)


def track_tag_invalidation(tag: str, removed: int) -> None:
    family = tag_family(tag)
    cache_tag_invalidations_total.labels(tag_family=family).inc()
    if removed:
        cache_tag_invalidated_keys_total.labels(tag_family=family).inc(removed)


def track_tag_oversized(tag: str) -> None:
    cache_tag_oversized_total.labels(tag_family=tag_family(tag)).inc()


# ============================================================================
# Retry Tracking
# ============================================================================


def track_retry_attempt(operation: str, attempt_number: int) -> None:
    """Track a retry attempt (attempt_number is 1-indexed)."""
    business.retry_attempts_total.labels(
        operation=operation,
        attempt_number=str(attempt_number),
    ).inc()


def track_retry_exhausted(operation: str) -> None:
    business.retry_exhausted_total.labels(operation=operation).inc()


def track_retry_success(operation: str, attempts_needed: int) -> None:
    business.retry_success_after_failure_total.labels(
        operation=operation,
        attempts_needed=str(attempts_needed),
    ).inc()
