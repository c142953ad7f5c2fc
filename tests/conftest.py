"""
Mchic Setlist — Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every test gets its own data directory, its own app instance and
       its own Settings, so no test sees another test's songs.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── settings:         Settings pointing at a tmp data file / public dir
    ├── file_store:       JsonFileSongStore on the tmp data file
    ├── sql_store:        SqlSongStore on a tmp SQLite database (aiosqlite)
    ├── client:           HTTPX AsyncClient, file backend
    ├── sql_client:       HTTPX AsyncClient, relational backend
    ├── auth_headers:     Valid Basic Authorization header
    └── sample_song_body: Concrete POST body from the front-end
"""

import base64
import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# mchic.main builds a module-level app on import; it needs a credential pair
os.environ.setdefault("MCHIC_USER", "lucio")
os.environ.setdefault("MCHIC_PASS", "battisti")
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from mchic.config import DEFAULT_SEED_FILE, Settings  # noqa: E402
from mchic.database import create_database_engine  # noqa: E402
from mchic.main import create_app  # noqa: E402
from mchic.services.file_store import JsonFileSongStore  # noqa: E402
from mchic.services.sql_store import SqlSongStore  # noqa: E402

TEST_USER = "duo"
TEST_PASS = "segreto"


def basic_auth(user: str, password: str) -> dict:
    token = base64.b64encode(f"{user}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def public_dir(tmp_path):
    """A front-end directory with an entry document and one asset."""
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<!doctype html><title>Mchic</title>", encoding="utf-8")
    (public / "app.js").write_text("console.log('mchic');", encoding="utf-8")
    return public


@pytest.fixture
def settings(tmp_path, public_dir):
    """
    File-backend settings isolated under tmp_path.

    The data file does not exist yet: the first read seeds it.
    """
    return Settings(
        mchic_user=TEST_USER,
        mchic_pass=TEST_PASS,
        storage_backend="file",
        data_file=str(tmp_path / "data" / "songs.json"),
        seed_file=str(DEFAULT_SEED_FILE),
        public_dir=str(public_dir),
        log_level="WARNING",
    )


@pytest.fixture
def sql_settings(tmp_path, public_dir):
    return Settings(
        mchic_user=TEST_USER,
        mchic_pass=TEST_PASS,
        storage_backend="sql",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'songs.db'}",
        public_dir=str(public_dir),
        log_level="WARNING",
    )


@pytest.fixture
def file_store(settings):
    return JsonFileSongStore(data_file=settings.data_file, seed_file=settings.seed_file)


@pytest_asyncio.fixture
async def sql_store(sql_settings) -> AsyncGenerator[SqlSongStore, None]:
    """SqlSongStore on an empty SQLite database with the songs table created."""
    store = SqlSongStore(engine=create_database_engine(sql_settings))
    await store.create_schema()
    yield store
    await store.close()


@pytest.fixture
def auth_headers():
    return basic_auth(TEST_USER, TEST_PASS)


@pytest.fixture
def sample_song_body():
    return {
        "author": "Cristiano",
        "title": "Prova",
        "voices": ["lucio", "cristiano"],
        "instruments": ["basso"],
        "keyOffset": 2,
    }


@pytest_asyncio.fixture
async def client(settings) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an async HTTP test client for the file backend.

    ASGITransport does not run the lifespan, so the store seeds itself
    lazily on the first request.

    Usage:
        async def test_health(client):
            response = await client.get("/api/health")
            assert response.status_code == 200
    """
    app = create_app(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest_asyncio.fixture
async def sql_client(sql_settings) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client for the relational backend (SQLite)."""
    app = create_app(sql_settings)
    store = app.state.song_store
    await store.create_schema()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    await store.close()
