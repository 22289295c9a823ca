"""Prometheus metrics for monitoring with exemplar support."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

# Custom registry keeps our series separate from the default process collectors
REGISTRY = CollectorRegistry()

# Covers response times from 1ms to 10s
DEFAULT_LATENCY_BUCKETS = (
    0.001,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
)

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

# Cache metrics
# cache_name is "redis" for application lookups and "http" for the response cache.
cache_hits_total = Counter(
    "cache_hits_total",
    "Total number of cache hits",
    ["cache_name"],
    registry=REGISTRY,
)

cache_misses_total = Counter(
    "cache_misses_total",
    "Total number of cache misses",
    ["cache_name"],
    registry=REGISTRY,
)

cache_operation_duration_seconds = Histogram(
    "cache_operation_duration_seconds",
    "Cache operation duration in seconds",
    ["operation", "cache_name"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

# Tag index metrics
cache_tag_invalidations_total = Counter(
    "cache_tag_invalidations_total",
    "Total number of tag invalidations. "
    "Usage: one increment per invalidate(tag) call, whether or not the tag had members.",
    ["tag_family"],
    registry=REGISTRY,
)

cache_tag_invalidated_keys_total = Counter(
    "cache_tag_invalidated_keys_total",
    "Total number of cache entries removed through tag invalidation",
    ["tag_family"],
    registry=REGISTRY,
)

cache_tag_oversized_total = Counter(
    "cache_tag_oversized_total",
    "Total number of track calls that left a tag membership set above the warning size. "
    "A steady rate means a tag is rarely invalidated while its key space keeps growing.",
    ["tag_family"],
    registry=REGISTRY,
)
