"""
Mchic Setlist — Abstract Song Store Interface
===============================================

What:  Abstract base classes defining the persistence contract for songs.
Why:   The JSON file backend and the relational backend are alternate
       implementations of one capability set. Routes depend on this
       interface only; the concrete class is chosen once at startup.
How:   Concrete stores inherit from SongStore (and SeededSongStore when
       they can restore a seed document).

Contract:
    - Not-found is a return value (None / False), never an exception
    - Storage failures raise FileStorageError or DatabaseError
    - list_songs() is ordered by case-insensitive author, then title,
      whichever backend is active

Implementations:
    - JsonFileSongStore (SeededSongStore): one JSON document on disk
    - SqlSongStore (SongStore): one row per song in the `songs` table
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from mchic.schemas.song import Song, SongPayload


class SongStore(ABC):
    """Persistence contract shared by every backend."""

    #: Short backend name reported by the health endpoint
    backend_name: str = "abstract"

    async def initialize(self) -> None:
        """Prepare the backing store at startup. Default: nothing to do."""

    async def close(self) -> None:
        """Release held resources at shutdown. Default: nothing to do."""

    @abstractmethod
    async def list_songs(self) -> List[Song]:
        """Return every song, ordered by author then title (case-insensitive)."""
        ...

    @abstractmethod
    async def insert(self, payload: SongPayload) -> Song:
        """
        Store a new song.

        Args:
            payload: A normalized song without id.

        Returns:
            The stored Song with a freshly generated UUID4 id.
        """
        ...

    @abstractmethod
    async def update(self, song_id: str, payload: SongPayload) -> Optional[Song]:
        """
        Replace every field of an existing song except its id.

        Returns:
            The updated Song, or None when no song has this id.
        """
        ...

    @abstractmethod
    async def delete(self, song_id: str) -> bool:
        """
        Remove a song.

        Returns:
            True when a song was removed, False when the id is unknown
            (the collection is left untouched).
        """
        ...


class SeededSongStore(SongStore):
    """
    A store that can be restored to a fixed seed document.

    Only the file backend implements this; the relational backend's data
    is managed outside the application.
    """

    @abstractmethod
    async def reset_to_seed(self) -> List[Song]:
        """
        Replace the whole collection with the seed document.

        Idempotent: two consecutive resets leave the same collection.
        """
        ...
