"""
ReviewShare Backend — Request ID Middleware
============================================

What:  Assigns an id to each incoming request and echoes it in the response.
How:   Uses the client's X-Request-ID when present, otherwise a short UUID.
       The id is stored in a ContextVar (read by loggers and the exception
       handlers) and on `request.state`.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Take X-Request-ID from the request, or generate 8 hex chars
        2. Store it in request_id_var and request.state.request_id
        3. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
