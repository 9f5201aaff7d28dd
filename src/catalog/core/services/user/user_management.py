from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.catalog.core.errors import ConflictError, NotFoundError
from src.catalog.core.security import PasswordHasher
from src.catalog.entities.core.user import (
    User,
    UserCredentials,
    UserRepository,
    UserUpdate,
)

_EMAIL_TAKEN = "User with this email already exists"


class UserManagementService:
    """Account lifecycle on top of the credential store."""

    def __init__(self, db_session: Session, password_hasher: PasswordHasher):
        self._db_session = db_session
        self._user_repo = UserRepository(db_session)
        self._password_hasher = password_hasher

    def create(self, name: str, email: str, password: str) -> User:
        """Register a new user.

        Raises:
            ConflictError: If the email is already registered
        """
        if self._user_repo.get_by_email(email) is not None:
            raise ConflictError(_EMAIL_TAKEN)

        password_hash = self._password_hasher.hash(password)
        try:
            user = self._user_repo.create(
                name=name, email=email, password_hash=password_hash
            )
            self._db_session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent sign-up for the same email
            self._db_session.rollback()
            raise ConflictError(_EMAIL_TAKEN) from e

        logger.info("Created user {}", user.id)
        return user

    def get(self, user_id: int) -> User | None:
        return self._user_repo.get(user_id)

    def get_by_email(self, email: str) -> UserCredentials | None:
        return self._user_repo.get_by_email(email)

    def list(self) -> list[User]:
        return self._user_repo.list_all()

    def update(
        self,
        user_id: int,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> User:
        """Update profile fields; ``None`` leaves a field unchanged.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If ``email`` belongs to another user
        """
        if self._user_repo.get(user_id) is None:
            raise NotFoundError("User not found")

        if email:
            owner = self._user_repo.get_by_email(email)
            if owner is not None and owner.id != user_id:
                raise ConflictError(_EMAIL_TAKEN)

        update = UserUpdate(
            name=name,
            email=email,
            password_hash=self._password_hasher.hash(password) if password else None,
        )
        try:
            self._user_repo.update(user_id, update)
            self._db_session.commit()
        except IntegrityError as e:
            self._db_session.rollback()
            raise ConflictError(_EMAIL_TAKEN) from e

        logger.info("Updated user {}", user_id)
        return self._user_repo.get(user_id)

    def remove(self, user_id: int) -> None:
        """Delete a user.

        Raises:
            NotFoundError: If the user does not exist
        """
        if not self._user_repo.delete(user_id):
            raise NotFoundError("User not found")
        self._db_session.commit()
        logger.info("Deleted user {}", user_id)
