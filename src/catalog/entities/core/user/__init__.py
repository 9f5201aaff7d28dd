"""User entity module.

This module contains all User-related classes organized by responsibility:
- User / UserCredentials: Domain entities (safe and hash-bearing projections)
- UserTable: Database persistence model
- UserRepository: Data access layer
"""

from .entity import User, UserCredentials, UserUpdate
from .repository import UserRepository
from .table import UserTable

__all__ = ["User", "UserCredentials", "UserUpdate", "UserTable", "UserRepository"]
