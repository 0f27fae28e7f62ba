"""
Document models for blogdb.

This module exports the models stored in and returned from MongoDB.
"""

from blogdb.models.user import User, WriteOutcome

__all__ = [
    "User",
    "WriteOutcome",
]
