"""
hnote Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── database_url: SQLite file in tmp_path (real SQL, no server needed)
    ├── store: connected NoteStore on that database
    ├── note_service: NoteService around `store`
    ├── mock_store: AsyncMock NoteStore for failure injection
    ├── test_client: HTTPX AsyncClient talking to an app built around `store`
    └── failing_client: same, around `mock_store`
"""

import os

# Settings are read at import time; keep tests off any real database
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["TLS_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from hnote.config import Settings
from hnote.main import create_app
from hnote.services.note_service import NoteService
from hnote.store import NoteStore


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'hnote.db'}"


@pytest.fixture
def test_settings(database_url):
    return Settings(database_url=database_url, tls_enabled=False, log_level="WARNING")


@pytest_asyncio.fixture
async def store(test_settings):
    """
    A connected NoteStore with an empty notes collection.

    Usage:
        async def test_insert(store):
            note = await store.insert(Note(...))
    """
    note_store = NoteStore.from_settings(test_settings)
    await note_store.connect()
    yield note_store
    await note_store.close()


@pytest.fixture
def note_service(store):
    return NoteService(store)


@pytest.fixture
def mock_store():
    """
    A NoteStore double whose methods are AsyncMocks.

    Usage:
        mock_store.find_all.side_effect = StoreError(message="notes fetch failed")
    """
    return AsyncMock(spec=NoteStore)


async def _client_for(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def test_client(store):
    """
    HTTPX AsyncClient routed straight into an app serving `store`.

    ASGITransport does not run the lifespan; the injected store is already connected.
    """
    async for client in _client_for(create_app(store=store)):
        yield client


@pytest_asyncio.fixture
async def failing_client(mock_store):
    async for client in _client_for(create_app(store=mock_store)):
        yield client
