"""
Tagboard Backend - Health Check Route
======================================

What:  Liveness/readiness probe for containers and load balancers.
How:   Runs `SELECT 1` against the engine; reports `unhealthy` with HTTP 503
       when the database cannot be reached.
"""

import logging
import time

from fastapi import APIRouter, Response, status
from sqlalchemy import text

from tagboard import __version__
from tagboard import database
from tagboard.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
