"""
MongoDB client configuration and handle resolution.

Provides motor client setup from settings, database/collection lookup
and client shutdown. The repository layer receives already-resolved
handles from here instead of creating connections itself.
"""

from typing import Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from blogdb.core.config import Settings, get_settings
from blogdb.core.logging_config import get_logger, redact_connection_string


logger = get_logger(__name__)


def create_client(
    connection_string: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> AsyncIOMotorClient:
    """
    Create a motor client for the given connection string.

    The client does not connect eagerly; the first awaited operation
    triggers server selection, bounded by
    ``mongodb_server_selection_timeout_ms``.

    Args:
        connection_string: MongoDB URL (defaults to settings.mongodb_url)
        settings: Settings instance (defaults to get_settings())

    Returns:
        Configured AsyncIOMotorClient

    Note:
        The driver owns connection pooling; one client per process is enough.
    """
    settings = settings or get_settings()
    url = connection_string or settings.mongodb_url

    client = AsyncIOMotorClient(
        url,
        serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
    )

    logger.debug(
        "Created MongoDB client",
        extra={
            "mongodb_url": redact_connection_string(url),
            "server_selection_timeout_ms": settings.mongodb_server_selection_timeout_ms,
        },
    )
    return client


def get_database(client: AsyncIOMotorClient, name: str) -> AsyncIOMotorDatabase:
    """Resolve a database handle by name (no network round trip)."""
    return client[name]


def get_collection(
    client: AsyncIOMotorClient,
    database_name: str,
    collection_name: str,
) -> AsyncIOMotorCollection:
    """Resolve a collection handle by database and collection name."""
    return get_database(client, database_name)[collection_name]


def close_client(client: AsyncIOMotorClient) -> None:
    """
    Close the client and its connection pool.

    Should be called once the owning repository is no longer used.
    """
    client.close()
    logger.debug("Closed MongoDB client")
