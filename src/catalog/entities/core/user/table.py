"""User database table model."""

from sqlmodel import Field

from src.catalog.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    The unique index on ``email`` is the final guard against duplicate
    accounts; services pre-check to report a clean conflict.
    """

    __tablename__ = "users"

    name: str = Field(nullable=False)
    email: str = Field(nullable=False, unique=True, index=True)
    password_hash: str = Field(nullable=False)
