"""
Mchic Setlist — Song Route Handlers
=====================================

What:  CRUD over /api/songs.
Why:   The front-end's only data source: list, create, edit, delete.
How:   Normalizes the body, delegates to the active SongStore, maps
       not-found return values to NotFoundError.
Who:   Called by the setlist table and the song editor in the browser.

Every route here requires HTTP Basic credentials (router dependency).
Bodies are read as raw JSON (`Any`) rather than a Pydantic model: the
normalization pipeline owns validation so rejections come back as 400
with the pipeline's message instead of FastAPI's 422 field errors.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, Body, Depends, Response

from mchic.dependencies import get_song_store
from mchic.exceptions import NotFoundError
from mchic.schemas.song import ErrorResponse, Song
from mchic.security import require_credentials
from mchic.services.song_store import SongStore
from mchic.services.song_validation import normalize_song_payload

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(
    prefix="/api",
    tags=["Songs"],
    dependencies=[Depends(require_credentials)],
    responses={
        401: {"description": "Missing or wrong credentials", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
)


@router.get(
    "/songs",
    response_model=List[Song],
    summary="List the repertoire",
    description="Returns every song ordered by author, then title (case-insensitive).",
)
async def list_songs(store: SongStore = Depends(get_song_store)) -> List[Song]:
    return await store.list_songs()


@router.post(
    "/songs",
    status_code=201,
    response_model=Song,
    responses={400: {"description": "Invalid song", "model": ErrorResponse}},
    summary="Add a song",
)
async def create_song(
    body: Any = Body(default=None),
    store: SongStore = Depends(get_song_store),
) -> Song:
    """
    Create a song from an untrusted body.

    Example:
        POST /api/songs
        {"author": "Cristiano", "title": "Prova", "voices": ["lucio", "cristiano"],
         "instruments": ["basso"], "keyOffset": 2}
        → 201 with instruments ["chitarra", "basso"]
    """
    payload = normalize_song_payload(body)
    return await store.insert(payload)


@router.put(
    "/songs/{song_id}",
    response_model=Song,
    responses={
        400: {"description": "Invalid song", "model": ErrorResponse},
        404: {"description": "Song not found", "model": ErrorResponse},
    },
    summary="Replace a song",
)
async def update_song(
    song_id: str,
    body: Any = Body(default=None),
    store: SongStore = Depends(get_song_store),
) -> Song:
    # Validation runs first: an invalid body for an unknown id is a 400
    payload = normalize_song_payload(body)
    song = await store.update(song_id, payload)
    if song is None:
        raise NotFoundError(resource_id=song_id)
    return song


@router.delete(
    "/songs/{song_id}",
    status_code=204,
    response_class=Response,
    responses={404: {"description": "Song not found", "model": ErrorResponse}},
    summary="Delete a song",
)
async def delete_song(
    song_id: str,
    store: SongStore = Depends(get_song_store),
) -> Response:
    if not await store.delete(song_id):
        raise NotFoundError(resource_id=song_id)
    return Response(status_code=204)
