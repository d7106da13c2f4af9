"""
Notes API — Health Check Route
================================

What:  Health check endpoint for monitoring and container probes.
How:   Pings the database through the application's Database handle.

Status levels:
    - healthy:   Database reachable
    - unhealthy: Database unreachable (the API cannot serve any note operation)
"""

import logging
import time

from fastapi import APIRouter, Request

from notes_api import __version__
from notes_api.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Report database connectivity and uptime."""
    database = request.app.state.database
    connected = await database.ping()

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
