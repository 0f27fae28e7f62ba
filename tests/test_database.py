"""
Tests for MongoDB client construction and handle resolution.
"""

from unittest.mock import MagicMock, patch

from motor.motor_asyncio import AsyncIOMotorClient

from blogdb.core.config import Settings
from blogdb.core.database import close_client, create_client, get_collection


class TestCreateClient:
    """Tests for create_client."""

    def test_create_client_applies_server_selection_timeout(self):
        """
        Test the configured timeout reaches the driver.

        Arrange: Settings with a short timeout
        Act: Create client
        Assert: Driver constructed with URL and serverSelectionTimeoutMS
        """
        # Arrange
        settings = Settings(_env_file=None, mongodb_server_selection_timeout_ms=1500)

        with patch("blogdb.core.database.AsyncIOMotorClient") as client_cls:
            # Act
            client = create_client("mongodb://db:27017", settings=settings)

        # Assert
        client_cls.assert_called_once_with(
            "mongodb://db:27017",
            serverSelectionTimeoutMS=1500,
        )
        assert client is client_cls.return_value

    def test_create_client_defaults_to_settings_url(self):
        """Test the settings URL is used when none is passed."""
        settings = Settings(_env_file=None, mongodb_url="mongodb://configured:27017")

        with patch("blogdb.core.database.AsyncIOMotorClient") as client_cls:
            create_client(settings=settings)

        assert client_cls.call_args.args[0] == "mongodb://configured:27017"

    async def test_create_client_is_lazy(self):
        """Test a real client can be built without a reachable server."""
        settings = Settings(_env_file=None, mongodb_server_selection_timeout_ms=100)

        client = create_client("mongodb://localhost:27016", settings=settings)
        try:
            assert isinstance(client, AsyncIOMotorClient)
        finally:
            close_client(client)


def test_get_collection_resolves_namespace():
    """Test database and collection names are looked up in order."""
    client = MagicMock()

    collection = get_collection(client, "blog", "users")

    client.__getitem__.assert_called_once_with("blog")
    client.__getitem__.return_value.__getitem__.assert_called_once_with("users")
    assert collection is client.__getitem__.return_value.__getitem__.return_value


def test_close_client():
    """Test close_client closes the driver client."""
    client = MagicMock()

    close_client(client)

    client.close.assert_called_once()
