"""
iBuddy Backend — Health Check Route
=====================================

What:  Liveness/readiness probe for Docker and load balancers.
How:   Runs `SELECT 1` against the document store. The service is only
       healthy when the store answers; otherwise the probe returns 503 so
       traffic is routed elsewhere.
"""

import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ibuddy import __version__
from ibuddy.database import Database, get_database
from ibuddy.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(database: Database = Depends(get_database)):
    connected = await database.ping()
    body = HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not connected:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
