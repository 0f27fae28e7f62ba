"""
Users repository for CRUD operations on the ``blog.users`` collection.

Provides data access layer for the User model. Every operation is a single
driver call; logical absence is reported through return values and store
faults propagate to the caller.
"""

from typing import Any, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING

from blogdb.core.config import Settings
from blogdb.core.database import close_client, create_client, get_collection
from blogdb.core.logging_config import get_logger, log_with_context
from blogdb.core.probes import check_database
from blogdb.models.user import User, WriteOutcome


DATABASE_NAME = "blog"
COLLECTION_NAME = "users"

# ObjectId.Empty: never assigned by the store
EMPTY_OBJECT_ID = ObjectId("0" * 24)

UserId = Union[ObjectId, str, None]

logger = get_logger(__name__)


def _coerce_user_id(user_id: UserId) -> Optional[Any]:
    """
    Normalize an identifier for an ``_id`` filter.

    Returns None for identifiers that can never match a stored user
    (None, empty string, the all-zero ObjectId). Strings that parse as
    ObjectIds are converted; other strings are matched as-is.

    Limitation: any 24-hex string is read as an ObjectId, so a document
    whose ``_id`` is stored as that literal string cannot be targeted
    through a string argument.
    """
    if user_id is None or user_id == EMPTY_OBJECT_ID:
        return None

    if isinstance(user_id, str):
        if not user_id.strip():
            return None
        try:
            user_id = ObjectId(user_id)
        except InvalidId:
            return user_id
        if user_id == EMPTY_OBJECT_ID:
            return None

    return user_id


class UsersRepository:
    """
    Repository for user data access.

    Provides async CRUD and filter operations over one MongoDB collection.
    The collection handle is injected; use ``from_connection_string`` to
    build a repository that owns its client.

    Attributes:
        collection: Motor collection holding user documents
        database: Database the collection belongs to

    Example:
        >>> async with UsersRepository.from_connection_string(
        ...     "mongodb://localhost:27017"
        ... ) as repo:
        ...     await repo.insert_user(User(name="Nikola", age=30))
        ...     users = await repo.get_users_by_field("name", "Nikola")
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        client: Optional[AsyncIOMotorClient] = None,
    ):
        """
        Initialize repository with a collection handle.

        Args:
            collection: Motor collection for user documents
            client: Client to close in ``close()``, if this repository owns it
        """
        self.collection = collection
        self._client = client

    @classmethod
    def from_connection_string(
        cls,
        connection_string: str,
        settings: Optional[Settings] = None,
    ) -> "UsersRepository":
        """
        Build a repository that owns a new client.

        Resolves the fixed ``blog`` database and ``users`` collection.
        No network round trip happens until the first operation.

        Args:
            connection_string: MongoDB URL, e.g. "mongodb://localhost:27017"
            settings: Settings for driver timeouts (defaults to get_settings())

        Returns:
            Ready-to-use UsersRepository; call ``close()`` when done
        """
        client = create_client(connection_string, settings=settings)
        collection = get_collection(client, DATABASE_NAME, COLLECTION_NAME)
        return cls(collection, client=client)

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self.collection.database

    def close(self) -> None:
        """Close the owned client, if any."""
        if self._client is not None:
            close_client(self._client)
            self._client = None

    async def __aenter__(self) -> "UsersRepository":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def check_connection(self, timeout_seconds: Optional[float] = None) -> bool:
        """
        Check whether the database is reachable.

        Args:
            timeout_seconds: Upper bound for the check
                (default: settings.check_connection_timeout_seconds)

        Returns:
            True if collections could be listed, False on any failure

        Note:
            Never raises for store faults. With an unreachable server and
            default settings this takes up to the 30 second server
            selection timeout.
        """
        return await check_database(self.database, timeout_seconds=timeout_seconds)

    async def get_all_users(self) -> List[User]:
        """
        Return every user in the collection.

        Returns:
            List of users in store-defined order (not guaranteed stable)
        """
        documents = await self.collection.find({}).to_list(length=None)

        log_with_context(
            logger,
            "debug",
            "Fetched all users",
            collection=self.collection.name,
            operation="get_all_users",
            count=len(documents),
        )
        return [User.from_document(doc) for doc in documents]

    async def get_users_by_field(self, field_name: str, field_value: Any) -> List[User]:
        """
        Return users whose ``field_name`` equals ``field_value``.

        Args:
            field_name: Document field, e.g. "name" or "location"
            field_value: Value to match by equality

        Returns:
            Matching users, empty list if the field doesn't exist or nothing matches

        Raises:
            ValueError: If field_name is empty

        Example:
            >>> users = await repo.get_users_by_field("location", "Beograd")
        """
        if not field_name:
            raise ValueError("field_name cannot be empty")

        documents = await self.collection.find({field_name: field_value}).to_list(length=None)

        log_with_context(
            logger,
            "debug",
            "Fetched users by field",
            collection=self.collection.name,
            operation="get_users_by_field",
            field=field_name,
            count=len(documents),
        )
        return [User.from_document(doc) for doc in documents]

    async def get_users(self, skip: int, limit: int) -> List[User]:
        """
        Return one page of users.

        Args:
            skip: Number of users to skip
            limit: Maximum number of users to return

        Returns:
            At most ``limit`` users after the first ``skip``, store-defined order

        Raises:
            ValueError: If skip or limit is negative
        """
        if skip < 0:
            raise ValueError(f"skip must be >= 0, got {skip}")
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")

        # The driver reads limit=0 as "no limit"
        if limit == 0:
            return []

        documents = await self.collection.find({}, skip=skip, limit=limit).to_list(length=None)

        log_with_context(
            logger,
            "debug",
            "Fetched users page",
            collection=self.collection.name,
            operation="get_users",
            skip=skip,
            limit=limit,
            count=len(documents),
        )
        return [User.from_document(doc) for doc in documents]

    async def insert_user(self, user: User) -> None:
        """
        Insert a user.

        The store assigns ``_id`` when the user has none; the assigned id
        is written back to ``user.id``.

        Raises:
            pymongo.errors.DuplicateKeyError: If ``user.id`` already exists
        """
        result = await self.collection.insert_one(user.to_document())
        user.id = result.inserted_id

        log_with_context(
            logger,
            "info",
            "Inserted user",
            collection=self.collection.name,
            operation="insert_user",
            user_id=result.inserted_id,
        )

    async def delete_user_by_id(self, user_id: UserId) -> bool:
        """
        Delete the user with the given ``_id``.

        Args:
            user_id: ObjectId or its hex string (24-hex strings are always
                converted, so string-typed hex ids are not reachable)

        Returns:
            True if a user was deleted, False if none matched

        Note:
            Empty identifiers return False without a database call.
        """
        object_id = _coerce_user_id(user_id)
        if object_id is None:
            return False

        result = await self.collection.delete_one({"_id": object_id})

        log_with_context(
            logger,
            "info",
            "Deleted user by id",
            collection=self.collection.name,
            operation="delete_user_by_id",
            user_id=object_id,
            count=result.deleted_count,
        )
        return result.deleted_count != 0

    async def delete_all_users(self) -> int:
        """
        Delete every user in the collection.

        Returns:
            Number of deleted users
        """
        result = await self.collection.delete_many({})

        log_with_context(
            logger,
            "info",
            "Deleted all users",
            collection=self.collection.name,
            operation="delete_all_users",
            count=result.deleted_count,
        )
        return result.deleted_count

    async def update_user_outcome(
        self,
        user_id: UserId,
        field_name: str,
        field_value: Any,
    ) -> WriteOutcome:
        """
        Set one field on a user and report what happened.

        The field doesn't need to be declared on User; the store keeps
        whatever is set.

        Args:
            user_id: ObjectId or its hex string (24-hex strings are always
                converted, so string-typed hex ids are not reachable)
            field_name: Field to set (may be new)
            field_value: New value

        Returns:
            WriteOutcome.MODIFIED if the document changed,
            WriteOutcome.UNCHANGED if it already held the value,
            WriteOutcome.NOT_FOUND if no user has that id

        Raises:
            ValueError: If field_name is empty or "_id"
        """
        if not field_name:
            raise ValueError("field_name cannot be empty")
        if field_name == "_id":
            raise ValueError("_id is immutable")

        object_id = _coerce_user_id(user_id)
        if object_id is None:
            return WriteOutcome.NOT_FOUND

        result = await self.collection.update_one(
            {"_id": object_id},
            {"$set": {field_name: field_value}},
        )

        if result.modified_count:
            outcome = WriteOutcome.MODIFIED
        elif result.matched_count:
            outcome = WriteOutcome.UNCHANGED
        else:
            outcome = WriteOutcome.NOT_FOUND

        log_with_context(
            logger,
            "info",
            f"Updated user: {outcome.value}",
            collection=self.collection.name,
            operation="update_user",
            user_id=object_id,
            field=field_name,
            count=result.modified_count,
        )
        return outcome

    async def update_user(self, user_id: UserId, field_name: str, field_value: Any) -> bool:
        """
        Set one field on a user.

        Returns:
            True if the user was modified, False otherwise
        """
        outcome = await self.update_user_outcome(user_id, field_name, field_value)
        return outcome is WriteOutcome.MODIFIED

    async def create_index_on_collection(
        self,
        collection: Union[AsyncIOMotorCollection, str],
        field: str,
    ) -> None:
        """
        Create an ascending single-field index.

        Args:
            collection: Collection handle, or a collection name in this
                repository's database
            field: Field to index

        Note:
            Creating an index that already exists is a no-op on the server.
        """
        if isinstance(collection, str):
            collection = self.database[collection]

        index_name = await collection.create_index([(field, ASCENDING)])

        log_with_context(
            logger,
            "info",
            "Created index",
            collection=collection.name,
            operation="create_index_on_collection",
            field=field,
            index=index_name,
        )
