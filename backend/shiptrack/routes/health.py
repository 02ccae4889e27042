"""
ShipTrack Backend — Health Check Route
=========================================

What:  GET /api/health for monitoring and load balancer probes.
How:   Runs SELECT 1 against the database and reports the result alongside
       version and uptime. Always answers 200 while the process is up; a
       database outage shows up as status="degraded".
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from shiptrack import __version__
from shiptrack.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        from shiptrack.database import engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "degraded"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        message="Server is running!",
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
