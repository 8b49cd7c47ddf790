"""
ReviewShare Backend — Health Check Route
=========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs a DescribeTable against the Users table and reports the result.
Who:   Called by container health checks, load balancers and monitoring.

Status levels:
    - healthy:   DynamoDB reachable (HTTP 200)
    - unhealthy: DynamoDB unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response, status

from reviewshare import __version__
from reviewshare.schemas.common import HealthResponse
from reviewshare.store import DynamoStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    response: Response,
    store: DynamoStore = Depends(get_store),
) -> HealthResponse:
    store_status = "connected"
    overall = "healthy"

    if not await store.ping():
        store_status = "disconnected"
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: DynamoDB unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        store=store_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
