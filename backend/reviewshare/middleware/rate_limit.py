"""
ReviewShare Backend — Rate Limiting Middleware
===============================================

What:  Per-IP sliding window rate limiter.
How:   Keeps the request timestamps of each IP in memory. On each request,
       timestamps older than the window are dropped; when the remaining
       count reaches the limit the request is answered with 429 and a
       Retry-After header.

Limits:
    In-memory state covers a single process only. With several uvicorn
    workers each worker enforces its own window.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from reviewshare.config import settings
from reviewshare.exceptions import RateLimitExceededError
from reviewshare.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

CLEANUP_EVERY = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Configuration (from settings):
        rate_limit_requests: Max requests per window
        rate_limit_window:   Window duration in seconds

    Excluded paths: /health and the API docs.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        window_start = now - settings.rate_limit_window

        timestamps = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = timestamps

        if len(timestamps) >= settings.rate_limit_requests:
            retry_after = int(timestamps[0] + settings.rate_limit_window - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                settings.rate_limit_window,
            )
            # Raised errors never reach the app's exception handlers from here
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(retry_after)},
            )

        timestamps.append(now)

        self._seen += 1
        if self._seen % CLEANUP_EVERY == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Drops IPs with no request inside the current window."""
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
