"""
Repository layer for data access.

Provides data access abstractions following the Repository pattern,
isolating MongoDB queries from calling code.
"""

from blogdb.repositories.users import UsersRepository

__all__ = ["UsersRepository"]
