"""
Mchic Setlist — Health Check Route
====================================

What:  GET /api/health liveness probe.
Why:   Hosting platforms ping it to decide whether the process is up.
How:   Answers without authentication and without touching storage, so
       a slow database never makes the probe flap.
"""

import logging
import time

from fastapi import APIRouter, Depends

from mchic import __version__
from mchic.dependencies import get_song_store
from mchic.schemas.song import HealthResponse
from mchic.services.song_store import SongStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(store: SongStore = Depends(get_song_store)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        storage=store.backend_name,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
