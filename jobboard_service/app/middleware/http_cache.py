"""Whole-response cache for GET requests.

The middleware stores successful GET responses in the shared cache store
under the key returned by ``http_cache_key``, the same function call sites
use to register and delete HTTP keys. It knows nothing about tags; call
sites that need a cached response dropped on write register its key with
``CacheOrchestrator.track_http``.

Store errors are not caught here. They propagate and surface as a 500.
"""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING, Any

from starlette.datastructures import MutableHeaders
from starlette.requests import Request

from jobboard_service.core.settings import get_http_cache_settings
from jobboard_service.infra.cache.keys import http_cache_key
from jobboard_service.infra.logging.lazy import get_lazy_logger
from jobboard_service.infra.metrics.tracking import track_cache_lookup

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

    from jobboard_service.core.settings.http_cache import HttpCacheSettings
    from jobboard_service.infra.cache.store import CacheStore

logger = logging.getLogger(__name__)
_lazy = get_lazy_logger(__name__)

CACHE_STATUS_HEADER = "x-cache"


class HttpCacheMiddleware:
    """Serve cached GET responses and populate the cache on misses.

    Cached entries hold the status, the headers listed in
    ``HttpCacheSettings.cached_headers`` and the base64-encoded body. Only
    ``200`` responses are stored, with the TTL of the longest matching
    ``route_ttls`` prefix or the global ``ttl``.

    Example:
        app.add_middleware(HttpCacheMiddleware)
    """

    def __init__(self, app: ASGIApp, settings: HttpCacheSettings | None = None) -> None:
        self.app = app
        self.settings = settings or get_http_cache_settings()

    def is_cacheable(self, request: Request) -> bool:
        if not self.settings.enabled or request.method != "GET":
            return False
        return request.url.path not in self.settings.exclude_paths

    def key_of(self, request: Request) -> str:
        return http_cache_key(request)

    @staticmethod
    def store_for(scope: Scope) -> CacheStore | None:
        app = scope.get("app")
        if app is None:
            return None
        return getattr(app.state, "cache_store", None)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        store = self.store_for(scope)
        if store is None or not self.is_cacheable(request):
            await self.app(scope, receive, send)
            return

        key = self.key_of(request)
        cached = await store.get(key)
        if isinstance(cached, dict) and "body" in cached:
            track_cache_lookup("http", hit=True)
            _lazy.debug(lambda: f"HTTP cache hit for {key}")
            await self._send_cached(cached, send)
            return

        track_cache_lookup("http", hit=False)

        status_code = 0
        stored_headers: list[list[str]] = []
        body_parts: list[bytes] = []
        complete = False

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code, complete
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = MutableHeaders(scope=message)
                stored_headers.extend(
                    [name, value]
                    for name, value in headers.items()
                    if name in self.settings.cached_headers
                )
                headers.append(CACHE_STATUS_HEADER, "MISS")
            elif message["type"] == "http.response.body" and status_code == 200:
                body_parts.append(message.get("body", b""))
                if not message.get("more_body", False):
                    complete = True
            await send(message)

        await self.app(scope, receive, send_wrapper)

        if status_code == 200 and complete:
            entry: dict[str, Any] = {
                "status": status_code,
                "headers": stored_headers,
                "body": base64.b64encode(b"".join(body_parts)).decode("ascii"),
            }
            await store.set(key, entry, self.settings.ttl_for(request.url.path))
            _lazy.debug(lambda: f"HTTP cache stored {key}")

    async def _send_cached(self, entry: dict[str, Any], send: Send) -> None:
        body = base64.b64decode(entry["body"])
        headers = [
            (name.encode("latin-1"), value.encode("latin-1"))
            for name, value in entry.get("headers", [])
        ]
        headers.append((b"content-length", str(len(body)).encode("latin-1")))
        headers.append((CACHE_STATUS_HEADER.encode("latin-1"), b"HIT"))

        await send(
            {
                "type": "http.response.start",
                "status": entry.get("status", 200),
                "headers": headers,
            }
        )
        await send({"type": "http.response.body", "body": body})
