"""User domain entity."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.catalog.entities.core._base import Entity


class User(Entity):
    """Safe projection of a user account.

    This is what leaves the service layer: it never carries the password hash.
    """

    name: str = Field(description="User's display name")
    email: str = Field(description="User's email address")

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.email == other.email
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((self.id, self.name, self.email))


class UserCredentials(User):
    """User record including the password hash, for credential checks only."""

    password_hash: str = Field(exclude=True, repr=False)

    def to_user(self) -> User:
        """Drop the password hash."""
        return User.model_validate(self.model_dump())


class UserUpdate(BaseModel):
    """Partial update of a user row.

    Only fields that were explicitly provided are written; the service layer
    is responsible for hashing passwords before building one of these.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=1)
    password_hash: str | None = Field(default=None, repr=False)

    def changes(self) -> dict[str, Any]:
        """Fields that were set to a value, keyed by column name."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }
