"""
Mchic Setlist — JSON File Song Store
======================================

What:  SongStore backed by a single JSON document on disk.
Why:   Zero-infrastructure persistence for a repertoire of a few dozen
       songs: no database server to run, trivially backed up.
How:   Every operation reads the whole array; every mutation writes the
       whole array back. Async file I/O through aiofiles keeps the event
       loop free while the disk works.

Lifecycle of the data file:
    1. First read: the file does not exist → the parent directory is
       created and the seed document is copied in
    2. Mutations: read → modify in memory → write the full document
    3. POST /api/reset: the seed document overwrites the file

Concurrency:
    There is no locking. Two requests mutating at the same time each
    read the same snapshot; the last write wins and the other change is
    lost. Acceptable for two users editing a short list. Writes go
    through a temp file and an atomic rename, so readers never see a
    half-written document.

Error handling:
    OSError, malformed JSON and records that do not match the Song
    schema are wrapped in FileStorageError with the path in `context`.
    The client only ever sees the generic 500 message.
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Any, List, Optional, Union

import aiofiles
import aiofiles.os
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from mchic.exceptions import FileStorageError
from mchic.schemas.song import Song, SongPayload
from mchic.services.song_store import SeededSongStore

logger = logging.getLogger(__name__)

_song_list = TypeAdapter(List[Song])


class JsonFileSongStore(SeededSongStore):
    """
    Song store persisting the whole collection as one JSON array.

    File format (UTF-8, pretty-printed so it stays hand-editable):
        [
          {"id": "…", "author": "Lucio Battisti", "title": "Emozioni",
           "voices": ["lucio"], "instruments": ["chitarra"], "keyOffset": 0},
          ...
        ]
    """

    backend_name = "file"

    def __init__(self, data_file: Union[str, Path], seed_file: Union[str, Path]):
        """
        Args:
            data_file: Where the live collection is stored.
            seed_file: Read-only document used on first run and on reset.
        """
        self.data_file = Path(data_file).resolve()
        self.seed_file = Path(seed_file).resolve()
        logger.info("JsonFileSongStore using data_file=%s", self.data_file)

    # ── SongStore API ─────────────────────────────────────────────────────

    async def initialize(self) -> None:
        # Creates and seeds the file up front instead of on the first request
        await self._read_songs()

    async def list_songs(self) -> List[Song]:
        songs = await self._read_songs()
        return sorted(songs, key=Song.sort_key)

    async def insert(self, payload: SongPayload) -> Song:
        songs = await self._read_songs()
        song = Song.from_payload(str(uuid.uuid4()), payload)
        songs.append(song)
        await self._write_songs(songs)
        logger.info("Song %s created: %s - %s", song.id, song.author, song.title)
        return song

    async def update(self, song_id: str, payload: SongPayload) -> Optional[Song]:
        songs = await self._read_songs()
        for index, existing in enumerate(songs):
            if existing.id == song_id:
                updated = Song.from_payload(existing.id, payload)
                songs[index] = updated
                await self._write_songs(songs)
                logger.info("Song %s updated", song_id)
                return updated
        return None

    async def delete(self, song_id: str) -> bool:
        songs = await self._read_songs()
        remaining = [song for song in songs if song.id != song_id]
        if len(remaining) == len(songs):
            return False
        await self._write_songs(remaining)
        logger.info("Song %s deleted", song_id)
        return True

    async def reset_to_seed(self) -> List[Song]:
        songs = await self._load_seed()
        await self._write_songs(songs)
        logger.info("Song collection reset to seed (%d songs)", len(songs))
        return sorted(songs, key=Song.sort_key)

    # ── File I/O ──────────────────────────────────────────────────────────

    async def _read_songs(self) -> List[Song]:
        """
        Load the live collection, seeding it on first use.

        Raises:
            FileStorageError: Unreadable file, invalid JSON or invalid records.
        """
        if not self.data_file.exists():
            logger.info("Data file %s missing, seeding from %s", self.data_file, self.seed_file)
            songs = await self._load_seed()
            await self._write_songs(songs)
            return songs
        return await self._load_document(self.data_file)

    async def _load_seed(self) -> List[Song]:
        return await self._load_document(self.seed_file)

    async def _load_document(self, path: Path) -> List[Song]:
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                raw = await f.read()
            return _song_list.validate_python(json.loads(raw))
        except OSError as e:
            logger.error("Failed to read song file %s: %s", path, str(e))
            raise FileStorageError(context={"path": str(path), "os_error": str(e)})
        except (ValueError, SchemaError) as e:
            # json.JSONDecodeError is a ValueError subclass
            logger.error("Song file %s is not a valid song list: %s", path, str(e))
            raise FileStorageError(context={"path": str(path), "error_type": type(e).__name__})

    async def _write_songs(self, songs: List[Song]) -> None:
        """
        Replace the data file atomically.

        The document goes to a sibling temp file first, then os.replace()
        swaps it in, so a concurrent reader sees the old or the new
        collection and never a truncated one.
        """
        document: List[Any] = [song.model_dump(by_alias=True) for song in songs]
        temp_file = self.data_file.with_name(f".{self.data_file.name}.{uuid.uuid4().hex}.tmp")
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(temp_file, "w", encoding="utf-8") as f:
                await f.write(json.dumps(document, ensure_ascii=False, indent=2))
            await aiofiles.os.replace(temp_file, self.data_file)
        except OSError as e:
            logger.error("Failed to write song file %s: %s", self.data_file, str(e))
            if temp_file.exists():
                await aiofiles.os.remove(temp_file)
            raise FileStorageError(context={"path": str(self.data_file), "os_error": str(e)})
