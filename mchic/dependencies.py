"""
Mchic Setlist — Store Factory & Request Dependencies
======================================================

What:  Builds the configured SongStore and exposes app-scoped objects to
       route handlers through FastAPI's dependency injection.
Why:   The backend choice happens exactly once, here. Route handlers ask
       for "the store" and never branch on which one is active.
"""

from fastapi import Request

from mchic.config import Settings
from mchic.database import create_database_engine
from mchic.services.file_store import JsonFileSongStore
from mchic.services.song_store import SeededSongStore, SongStore
from mchic.services.sql_store import SqlSongStore


def build_song_store(settings: Settings) -> SongStore:
    """
    Instantiate the store selected by STORAGE_BACKEND.

    No I/O happens here; stores prepare themselves in initialize().
    """
    if settings.storage_backend == "sql":
        return SqlSongStore(
            engine=create_database_engine(settings),
            auto_create=settings.db_auto_create,
        )
    return JsonFileSongStore(data_file=settings.data_file, seed_file=settings.seed_file)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_song_store(request: Request) -> SongStore:
    return request.app.state.song_store


def get_seeded_store(request: Request) -> SeededSongStore:
    # Only mounted when the active store supports reset (see main.create_app)
    return request.app.state.song_store
