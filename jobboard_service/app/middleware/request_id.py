"""Request ID middleware for per-request tracking.

Takes X-Request-ID from the request or generates a UUID, exposes it as
``request.state.request_id``, puts it in the logging context and returns it
in the X-Request-ID response header. The logging context is cleared when the
request completes.
"""

from __future__ import annotations

from jobboard_service.app.middleware.base import HeaderContextMiddleware, generate_uuid


class RequestIDMiddleware(HeaderContextMiddleware):
    """Add a unique request ID to every request."""

    header_name = "x-request-id"
    state_key = "request_id"
    log_context_key = "request_id"
    should_clear_context_on_finish = True

    def generate_value(self) -> str:
        return generate_uuid()
