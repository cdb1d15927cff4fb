"""
Blog Backend: Health Check Route
=================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings the database through the app's injected handle and reports
       status, version and uptime.
Who:   Called by container health checks and load balancers.

Status levels:
    - healthy:   database answers SELECT 1
    - unhealthy: database unreachable (still HTTP 200 so probes can read the body)
"""

import logging
import time

from fastapi import APIRouter, Depends

from blog_app import __version__
from blog_app.database import Database, get_database
from blog_app.schemas.post import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(database: Database = Depends(get_database)) -> HealthResponse:
    if await database.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "unhealthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
