"""
Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup for tests
- Mocked motor collection for driver-call assertions
- In-memory motor-compatible collection for behavioural tests
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
from mongomock_motor import AsyncMongoMockClient


# Set test environment variables BEFORE any imports
# This must happen first to ensure settings load with test values
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ["MONGODB_SERVER_SELECTION_TIMEOUT_MS"] = "2000"
os.environ["CHECK_CONNECTION_TIMEOUT_SECONDS"] = "2.0"
os.environ["LOG_LEVEL"] = "DEBUG"


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so monkeypatched env vars take effect."""
    from blogdb.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _make_cursor(documents):
    """Build a mock motor cursor whose to_list() returns ``documents``."""
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=list(documents))
    return cursor


@pytest.fixture
def make_cursor():
    """Factory for mock cursors over fixed documents."""
    return _make_cursor


@pytest.fixture
def mock_collection():
    """
    Provide a MagicMock standing in for an AsyncIOMotorCollection.

    Awaitable driver methods are AsyncMocks; find() returns an empty cursor
    unless a test overrides it.
    """
    collection = MagicMock()
    collection.name = "users"
    collection.database.name = "blog"
    collection.find = MagicMock(return_value=_make_cursor([]))
    collection.insert_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.delete_many = AsyncMock()
    collection.update_one = AsyncMock()
    collection.create_index = AsyncMock(return_value="field_1")
    return collection


@pytest.fixture
async def memory_collection():
    """
    Provide an empty in-memory ``blog.users`` collection.

    Returns:
        mongomock-motor collection with the motor async API
    """
    client = AsyncMongoMockClient()
    collection = client["blog"]["users"]
    await collection.delete_many({})
    return collection


@pytest.fixture
def seeded_users():
    """The two users every behavioural test starts from."""
    from blogdb.models.user import User

    return [
        User(name="Nikola", age=30, blog="rubikscode.net", location="Beograd"),
        User(name="Vanja", age=27, blog="eventroom.net", location="Beograd"),
    ]
