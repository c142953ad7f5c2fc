"""
Mchic Setlist — Relational Store Tests
========================================

What:  Tests for SqlSongStore on SQLite through aiosqlite.
Why:   Production runs PostgreSQL, but the statements are dialect-neutral
       SQLAlchemy; the list columns fall back to JSON on SQLite.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import Text
from sqlalchemy.exc import OperationalError

from mchic.exceptions import DatabaseError
from mchic.models.song import SongRecord
from mchic.schemas.song import SongPayload


def make_payload(**overrides) -> SongPayload:
    fields = {
        "author": "Lucio Dalla",
        "title": "Caruso",
        "voices": ["lucio"],
        "instruments": ["chitarra", "chitarra"],
        "key_offset": 0,
    }
    fields.update(overrides)
    return SongPayload(**fields)


@pytest.mark.asyncio
async def test_empty_table_lists_nothing(sql_store):
    assert await sql_store.list_songs() == []


@pytest.mark.asyncio
async def test_insert_then_list_round_trip(sql_store):
    payload = make_payload(key_offset=2)
    created = await sql_store.insert(payload)

    songs = await sql_store.list_songs()

    assert [song.id for song in songs] == [created.id]
    assert songs[0].model_dump(exclude={"id"}) == payload.model_dump()
    assert uuid.UUID(created.id).version == 4


@pytest.mark.asyncio
async def test_integral_key_offset_comes_back_as_int(sql_store):
    await sql_store.insert(make_payload(key_offset=-3))
    (song,) = await sql_store.list_songs()
    assert song.key_offset == -3
    assert isinstance(song.key_offset, int)


@pytest.mark.asyncio
async def test_listing_sorted_case_insensitively(sql_store):
    await sql_store.insert(make_payload(author="vasco rossi", title="Albachiara"))
    await sql_store.insert(make_payload(author="Fabrizio De André", title="Bocca di rosa"))
    await sql_store.insert(make_payload(author="Fabrizio De André", title="amico fragile"))

    songs = await sql_store.list_songs()

    assert [song.title for song in songs] == ["amico fragile", "Bocca di rosa", "Albachiara"]


@pytest.mark.asyncio
async def test_update_replaces_fields_and_keeps_id(sql_store):
    created = await sql_store.insert(make_payload())

    updated = await sql_store.update(
        created.id,
        make_payload(title="Caruso (live)", voices=["cristiano"], key_offset=1.5),
    )

    assert updated is not None
    assert updated.id == created.id
    assert updated.title == "Caruso (live)"
    assert updated.voices == ["cristiano"]
    assert updated.key_offset == 1.5


@pytest.mark.asyncio
async def test_update_unknown_id_returns_none(sql_store):
    assert await sql_store.update(str(uuid.uuid4()), make_payload()) is None


@pytest.mark.asyncio
async def test_non_uuid_id_is_not_found(sql_store):
    assert await sql_store.update("not-a-uuid", make_payload()) is None
    assert await sql_store.delete("not-a-uuid") is False


@pytest.mark.asyncio
async def test_delete(sql_store):
    created = await sql_store.insert(make_payload())
    other = await sql_store.insert(make_payload(title="Futura"))

    assert await sql_store.delete(created.id) is True
    assert await sql_store.delete(created.id) is False
    assert [song.id for song in await sql_store.list_songs()] == [other.id]


@pytest.mark.asyncio
async def test_statement_failure_raises_database_error(sql_store):
    """Driver errors are wrapped; the SQL text stays out of the message."""
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("disk I/O error"))
    failing_factory = MagicMock()
    failing_factory.return_value.__aenter__.return_value = session
    failing_factory.return_value.__aexit__.return_value = False

    with patch.object(sql_store, "_session_factory", failing_factory):
        with pytest.raises(DatabaseError) as exc_info:
            await sql_store.list_songs()

    assert exc_info.value.context["operation"] == "list"
    assert exc_info.value.message == "Errore interno al server."


def test_text_columns_have_no_length_limit():
    """PostgreSQL enforces VARCHAR(n); SQLite does not, so check the schema."""
    for column in ("author", "title"):
        column_type = SongRecord.__table__.c[column].type
        assert isinstance(column_type, Text)
        assert column_type.length is None


@pytest.mark.asyncio
async def test_long_author_and_title_round_trip(sql_store):
    payload = make_payload(author="Lucio Battisti " * 40, title="Il mio canto libero " * 20)
    created = await sql_store.insert(payload)
    (song,) = await sql_store.list_songs()
    assert song.title == payload.title
    assert song.id == created.id
