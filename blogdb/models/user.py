"""
User document model.

Represents one document of the ``blog.users`` collection. Known attributes
are typed; anything else the store holds (fields added through ad hoc
updates) is kept on the model as extra data.
"""

from enum import Enum
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from blogdb.core.logging_config import get_logger


logger = get_logger(__name__)


class User(BaseModel):
    """
    User record as persisted in MongoDB.

    Wire shape::

        {"_id": ObjectId, "name": str, "blog": str, "age": int,
         "location": str, ...ad hoc fields}

    Attributes:
        id: Store-generated ObjectId (``_id``), None until inserted
        name: Display name
        blog: Blog URL or title
        age: Age in years
        location: Free-form location

    Example:
        >>> user = User(name="Nikola", age=30, blog="rubikscode.net", location="Beograd")
        >>> user.to_document()
        {'name': 'Nikola', 'blog': 'rubikscode.net', 'age': 30, 'location': 'Beograd'}
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,  # bson.ObjectId
        populate_by_name=True,
        extra="allow",
    )

    id: Optional[ObjectId] = Field(default=None, alias="_id")
    name: Optional[str] = None
    blog: Optional[str] = None
    age: Optional[int] = None
    location: Optional[str] = None

    @property
    def extra_fields(self) -> Dict[str, Any]:
        """Fields present on the document but not declared on the model."""
        return dict(self.model_extra or {})

    def to_document(self) -> Dict[str, Any]:
        """
        Convert to a MongoDB document.

        Declared fields that are None (including ``_id`` while unset) are
        left out, so the store assigns the id and no explicit nulls are
        written. Extra fields are written as they are, None included.
        """
        # warnings=False: declared fields may hold raw store values, see from_document
        document = self.model_dump(by_alias=True, warnings=False)
        for name, field in type(self).model_fields.items():
            key = field.alias or name
            if document.get(key) is None:
                document.pop(key, None)
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "User":
        """
        Build a User from a raw MongoDB document.

        The store is schema-flexible, so a declared field can hold a value
        of another type (e.g. ``age`` set to "thirty" through update_user).
        Such values are kept as-is on the attribute instead of failing the
        whole read.

        Example:
            >>> user = User.from_document({"_id": oid, "name": "Nikola", "age": "thirty"})
            >>> user.age
            'thirty'
        """
        try:
            return cls.model_validate(document)
        except ValidationError as e:
            keys = {field.alias or name: name for name, field in cls.model_fields.items()}
            mismatched = {
                error["loc"][0]
                for error in e.errors()
                if error["loc"] and error["loc"][0] in keys
            }
            if not mismatched:
                raise

        user = cls.model_validate(
            {key: value for key, value in document.items() if key not in mismatched}
        )
        for key in mismatched:
            # No validate_assignment on this model, so this stores the raw value
            setattr(user, keys[key], document[key])

        logger.warning(
            "Document fields do not match declared types",
            extra={"user_id": user.id, "fields": sorted(mismatched)},
        )
        return user


class WriteOutcome(str, Enum):
    """
    Result of a single-document write.

    Store faults are not represented here; they propagate as exceptions.
    """

    MODIFIED = "modified"
    UNCHANGED = "unchanged"  # matched, value already equal
    NOT_FOUND = "not_found"
