"""User repository for data access operations."""

from sqlmodel import Session, select

from src.catalog.entities.core._base import touch

from .entity import User, UserCredentials, UserUpdate
from .table import UserTable


class UserRepository:
    """Data-access layer for users.

    Writes are flushed but not committed; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: int) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_by_email(self, email: str) -> UserCredentials | None:
        statement = select(UserTable).where(UserTable.email == email)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return UserCredentials.model_validate(row, from_attributes=True)

    def list_all(self) -> list[User]:
        statement = select(UserTable).order_by(UserTable.id)
        rows = self._session.exec(statement).all()
        return [User.model_validate(row, from_attributes=True) for row in rows]

    def create(self, name: str, email: str, password_hash: str) -> User:
        row = UserTable(name=name, email=email, password_hash=password_hash)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def update(self, user_id: int, update: UserUpdate) -> bool:
        """Apply ``update`` to a user. Returns False when the user does not exist."""
        row = self._session.get(UserTable, user_id)
        if row is None:
            return False

        for field, value in update.changes().items():
            setattr(row, field, value)
        touch(row)

        self._session.add(row)
        self._session.flush()
        return True

    def delete(self, user_id: int) -> bool:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True
