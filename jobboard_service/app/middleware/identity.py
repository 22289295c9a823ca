"""Caller identity from the upstream gateway.

The gateway authenticates the caller and forwards the user id in X-User-Id.
This middleware exposes it as ``request.state.user_id`` (``None`` for
anonymous requests) before the response cache runs, so per-user responses
get per-user cache keys.
"""

from __future__ import annotations

from jobboard_service.app.middleware.base import HeaderContextMiddleware


class IdentityMiddleware(HeaderContextMiddleware):
    """Store the forwarded user id on the request state."""

    header_name = "x-user-id"
    state_key = "user_id"
    log_context_key = "user_id"
    should_generate_if_missing = False
    should_echo_header = False
