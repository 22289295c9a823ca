"""HTTP middleware.

Order, outermost first: metrics, request id, identity, response cache.
"""

from __future__ import annotations

from jobboard_service.app.middleware.base import HeaderContextMiddleware
from jobboard_service.app.middleware.http_cache import HttpCacheMiddleware
from jobboard_service.app.middleware.identity import IdentityMiddleware
from jobboard_service.app.middleware.metrics import MetricsMiddleware
from jobboard_service.app.middleware.request_id import RequestIDMiddleware

__all__ = [
    "HeaderContextMiddleware",
    "HttpCacheMiddleware",
    "IdentityMiddleware",
    "MetricsMiddleware",
    "RequestIDMiddleware",
]
