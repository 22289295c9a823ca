"""Base middleware class for header-based context propagation.

Subclasses read one request header, keep the value in ``scope["state"]``
(visible as ``request.state.<state_key>``), add it to the logging context
and, optionally, echo it on the response.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from starlette.datastructures import MutableHeaders

from jobboard_service.infra.logging.context import clear_log_context, set_log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send


class HeaderContextMiddleware:
    """Base for header-based context propagation middleware.

    Subclasses must define:
    - header_name: HTTP header to read (lowercase)
    - state_key: key in scope["state"]
    - log_context_key: key in the logging context

    Subclasses that generate a value for requests without the header
    override generate_value(); the default generates nothing.

    Optional class attributes:
    - should_generate_if_missing: call generate_value() when absent (default: True)
    - should_echo_header: add the value to the response headers (default: True)
    - should_clear_context_on_finish: clear the log context afterwards (default: False)
    """

    header_name: str
    state_key: str
    log_context_key: str

    should_generate_if_missing: bool = True
    should_echo_header: bool = True
    should_clear_context_on_finish: bool = False

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    def generate_value(self) -> str | None:
        return None

    def normalize(self, value: str) -> str | None:
        """Clean a raw header value; ``None`` discards it."""
        return value.strip() or None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        value = self._extract_or_generate(scope)

        state = scope.setdefault("state", {})
        state[self.state_key] = value
        if value:
            set_log_context(**{self.log_context_key: value})

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start" and value and self.should_echo_header:
                MutableHeaders(scope=message).append(self.header_name, value)
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            if self.should_clear_context_on_finish:
                clear_log_context()

    def _extract_or_generate(self, scope: Scope) -> str | None:
        # Set by an upstream middleware
        if existing := scope.get("state", {}).get(self.state_key):
            return existing

        headers = dict(scope.get("headers", []))
        header_bytes = headers.get(self.header_name.encode("latin-1"))
        if header_bytes:
            value = self.normalize(header_bytes.decode("latin-1"))
            if value:
                return value

        if self.should_generate_if_missing:
            return self.generate_value()
        return None


def generate_uuid() -> str:
    return str(uuid.uuid4())
