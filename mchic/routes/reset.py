"""
Mchic Setlist — Reset Route
=============================

What:  POST /api/reset restores the seed repertoire.
Who:   Only mounted when the active store is a SeededSongStore (the JSON
       file backend). With the relational backend the path answers 404.
"""

import logging

from fastapi import APIRouter, Depends

from mchic.dependencies import get_seeded_store
from mchic.schemas.song import ErrorResponse, ResetResponse
from mchic.security import require_credentials
from mchic.services.song_store import SeededSongStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Songs"],
    dependencies=[Depends(require_credentials)],
)


@router.post(
    "/reset",
    response_model=ResetResponse,
    responses={
        401: {"description": "Missing or wrong credentials", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Restore the seed repertoire",
)
async def reset_songs(store: SeededSongStore = Depends(get_seeded_store)) -> ResetResponse:
    songs = await store.reset_to_seed()
    return ResetResponse(ok=True, count=len(songs))
