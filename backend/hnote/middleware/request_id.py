"""
hnote Backend — Request ID Middleware
======================================

What:  Assigns a short correlation ID to each request and returns it in the
       X-Request-ID response header.
How:   Reuses a client-supplied X-Request-ID, otherwise generates one; stores it
       in a ContextVar so loggers and exception handlers can read it.
When:  Outermost middleware, so every log line of a request carries the ID.
"""

import uuid
from contextvars import ContextVar
from typing import Awaitable, Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

ErrorRenderer = Callable[[Request, Exception], Awaitable[Response]]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header if present
        2. Otherwise generate the first 8 characters of a UUID4
        3. Expose it via request_id_var and request.state.request_id
        4. Render unhandled exceptions with `on_error` while the ID is still set
        5. Echo it in the response headers
    """

    def __init__(self, app: ASGIApp, on_error: Optional[ErrorRenderer] = None) -> None:
        super().__init__(app)
        self.on_error = on_error

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        except Exception as exc:
            if self.on_error is None:
                raise
            response = await self.on_error(request, exc)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
