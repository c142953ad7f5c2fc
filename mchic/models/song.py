"""
Mchic Setlist — Song SQLAlchemy Model
=======================================

What:  ORM model representing the `songs` table.
Why:   Maps rows to Python objects for the relational song store.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for the
       baseline revision.
Who:   Used by SqlSongStore for every statement it issues.

Table Design Rationale:
    - UUID primary key: generated in Python so INSERT stays a single statement
    - author / title: unbounded TEXT, the JSON file store has no length limit either
    - voices / instruments: PostgreSQL TEXT[] arrays, one row per song.
      Other dialects (SQLite in tests) store the same lists as JSON.
    - key_offset: float, semitone transposition; integral values are
      converted back to int when mapped to the API schema
    - No index besides the primary key: ordering by lower(author),
      lower(title) scans a table of a few dozen rows
"""

import uuid
from typing import List

from sqlalchemy import JSON, Float, Text, Uuid
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from mchic.database import Base

# TEXT[] on PostgreSQL, JSON everywhere else
StringList = JSON().with_variant(ARRAY(Text()), "postgresql")


class SongRecord(Base):
    """
    One song of the repertoire as stored in the database.

    Query Patterns:
        - List: SELECT ... ORDER BY lower(author), lower(title)
        - Update / delete: WHERE id = :uuid (primary key)
    """

    __tablename__ = "songs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    author: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)

    voices: Mapped[List[str]] = mapped_column(StringList, nullable=False)
    instruments: Mapped[List[str]] = mapped_column(StringList, nullable=False)

    key_offset: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    def __repr__(self) -> str:
        """Developer-friendly string representation for debugging."""
        return f"<SongRecord(id={self.id}, author='{self.author}', title='{self.title}')>"
