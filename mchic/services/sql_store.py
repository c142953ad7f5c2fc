"""
Mchic Setlist — Relational Song Store
=======================================

What:  SongStore backed by the `songs` table through async SQLAlchemy.
Why:   Hosted deployments keep the repertoire in PostgreSQL next to
       their other data; the table is managed outside the application.
How:   Each operation opens its own session and issues exactly one
       statement. No multi-statement transactions are needed: a crash
       between statements cannot leave a half-applied mutation.

Statement map:
    list_songs → SELECT ... ORDER BY lower(author), lower(title)
    insert     → INSERT (id generated in Python)
    update     → UPDATE ... WHERE id = :id RETURNING *
    delete     → DELETE ... WHERE id = :id (rowcount tells not-found)

Error Handling Strategy:
    SQLAlchemy errors are logged with context and wrapped in DatabaseError,
    which the global handler turns into a generic 500. Ids that are not
    valid UUIDs cannot exist in the table and are reported as not-found
    without touching the database.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from mchic.database import Base, create_session_factory
from mchic.exceptions import DatabaseError
from mchic.models.song import SongRecord
from mchic.schemas.song import Song, SongPayload
from mchic.services.song_validation import normalize_key_offset
from mchic.services.song_store import SongStore

logger = logging.getLogger(__name__)


class SqlSongStore(SongStore):
    """
    Song store issuing one SQL statement per operation.

    The store owns its engine: close() disposes the connection pool.
    """

    backend_name = "sql"

    def __init__(self, engine: AsyncEngine, auto_create: bool = False):
        """
        Args:
            engine: Async engine built by database.create_database_engine().
            auto_create: Create the `songs` table in initialize() when missing.
        """
        self.engine = engine
        self.auto_create = auto_create
        self._session_factory = create_session_factory(engine)

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        if self.auto_create:
            await self.create_schema()

    async def create_schema(self) -> None:
        """CREATE TABLE IF NOT EXISTS for every mapped model."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error("Could not create database schema: %s", str(e))
            raise DatabaseError(context={"operation": "create_schema"})
        logger.info("Database schema ready")

    async def close(self) -> None:
        # Returns every pooled connection to the server
        await self.engine.dispose()

    # ── SongStore API ─────────────────────────────────────────────────────

    async def list_songs(self) -> List[Song]:
        query = select(SongRecord).order_by(
            func.lower(SongRecord.author),
            func.lower(SongRecord.title),
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return [_to_song(record) for record in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing songs: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "list", "error_type": type(e).__name__})

    async def insert(self, payload: SongPayload) -> Song:
        record = SongRecord(id=uuid.uuid4(), **_column_values(payload))
        try:
            async with self._session_factory() as session:
                session.add(record)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Database error inserting song: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "insert", "error_type": type(e).__name__})

        logger.info("Song %s created: %s - %s", record.id, record.author, record.title)
        return _to_song(record)

    async def update(self, song_id: str, payload: SongPayload) -> Optional[Song]:
        record_id = _parse_id(song_id)
        if record_id is None:
            return None

        statement = (
            update(SongRecord)
            .where(SongRecord.id == record_id)
            .values(**_column_values(payload))
            .returning(SongRecord)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
                record = result.scalars().first()
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Database error updating song %s: %s", song_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "update", "song_id": song_id})

        if record is None:
            return None
        logger.info("Song %s updated", song_id)
        return _to_song(record)

    async def delete(self, song_id: str) -> bool:
        record_id = _parse_id(song_id)
        if record_id is None:
            return False

        statement = delete(SongRecord).where(SongRecord.id == record_id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting song %s: %s", song_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "delete", "song_id": song_id})

        if not result.rowcount:
            return False
        logger.info("Song %s deleted", song_id)
        return True


# ── Mapping Helpers ───────────────────────────────────────────────────────


def _parse_id(song_id: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(song_id)
    except (ValueError, TypeError):
        return None


def _column_values(payload: SongPayload) -> dict:
    return {
        "author": payload.author,
        "title": payload.title,
        "voices": list(payload.voices),
        "instruments": list(payload.instruments),
        "key_offset": float(payload.key_offset),
    }


def _to_song(record: SongRecord) -> Song:
    return Song(
        id=str(record.id),
        author=record.author,
        title=record.title,
        voices=list(record.voices or []),
        instruments=list(record.instruments or []),
        # NUMERIC columns from an externally created table arrive as Decimal
        key_offset=normalize_key_offset(float(record.key_offset or 0)),
    )
