"""Deterministic cache key construction.

Two key families share one store:

* application keys, ``|``-joined segments chosen by the call site
  (``jobs|public|list|q=python|page=1``);
* HTTP keys, the request path plus its query re-serialized in sorted order,
  optionally scoped to a user (``u:42|/job-posting/recruiter?page=2``).

Logically identical inputs always produce the same key, regardless of query
parameter order or of ``None`` versus a missing value.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

if TYPE_CHECKING:
    from starlette.requests import Request

SEPARATOR = "|"
USER_SCOPE_PREFIX = "u:"

QueryInput = Mapping[str, Any] | Iterable[tuple[str, Any]]


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(item) for item in value if item is not None)
    return str(value).strip()


def build_key(*segments: Any) -> str:
    """Join segments into a cache key.

    ``None`` and blank segments are dropped; ``0`` and ``False`` are kept.
    Order matters: pass namespace, entity, operation, scope, then filters.

    Example:
        >>> build_key("a", None, " b ", 1, False, None)
        'a|b|1|false'
    """
    parts = []
    for segment in segments:
        if segment is None:
            continue
        text = _stringify(segment)
        if text:
            parts.append(text)
    return SEPARATOR.join(parts)


def _query_pairs(query: QueryInput) -> list[tuple[str, str]]:
    items = query.items() if isinstance(query, Mapping) else query
    pairs: list[tuple[str, str]] = []
    for name, value in items:
        values = value if isinstance(value, (list, tuple)) else (value,)
        for item in values:
            if item is None:
                continue
            text = _stringify(item)
            if text:
                pairs.append((name, text))
    # Stable: repeated parameters keep their relative order
    pairs.sort(key=lambda pair: pair[0])
    return pairs


def build_http_key(
    user_id: str | int | None,
    path: str,
    query: QueryInput | None = None,
) -> str:
    """Build the cache key of an HTTP GET response.

    Any query string embedded in ``path`` is discarded; only ``query`` is
    serialized. Parameters are sorted by name and form-encoded. The key is
    prefixed with ``u:{user_id}|`` when a user is given.

    Example:
        >>> build_http_key("42", "/jobs", {"page": 2, "q": "python", "remote": None})
        'u:42|/jobs?page=2&q=python'
    """
    base = path.split("?", 1)[0]
    if query:
        encoded = urlencode(_query_pairs(query))
        if encoded:
            base = f"{base}?{encoded}"
    if user_id is None or str(user_id) == "":
        return base
    return f"{USER_SCOPE_PREFIX}{user_id}{SEPARATOR}{base}"


def http_cache_key(request: Request) -> str:
    """HTTP key of a live request.

    The response cache middleware and the call sites that register or delete
    HTTP keys both go through this function, so their keys always agree.
    """
    user_id = getattr(request.state, "user_id", None)
    return build_http_key(user_id, request.url.path, request.query_params.multi_items())
