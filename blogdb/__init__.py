"""
blogdb: async data access for the ``blog.users`` MongoDB collection.
"""

from blogdb.core.logging_config import configure_logging
from blogdb.models.user import User, WriteOutcome
from blogdb.repositories.users import UsersRepository

__all__ = [
    "configure_logging",
    "User",
    "UsersRepository",
    "WriteOutcome",
]
