from loguru import logger

from src.catalog.core.errors import UnauthorizedError
from src.catalog.core.models.claims import AccessToken
from src.catalog.core.security import PasswordHasher
from src.catalog.core.services.jwt.jwt_gen import JwtGeneratorService
from src.catalog.core.services.user.user_management import UserManagementService
from src.catalog.entities.core.user import User

_INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """Sign-up, sign-in and current-user resolution."""

    def __init__(
        self,
        user_service: UserManagementService,
        jwt_generator: JwtGeneratorService,
        password_hasher: PasswordHasher,
    ):
        self._user_service = user_service
        self._jwt_generator = jwt_generator
        self._password_hasher = password_hasher

    def sign_up(self, name: str, email: str, password: str) -> AccessToken:
        """Create an account and return a token for it.

        Raises:
            ConflictError: If the email is already registered
        """
        user = self._user_service.create(name=name, email=email, password=password)
        return self._issue(user)

    def sign_in(self, email: str, password: str) -> AccessToken:
        """Exchange credentials for a token.

        Unknown email and wrong password raise the same error.

        Raises:
            UnauthorizedError: If the credentials do not match
        """
        credentials = self._user_service.get_by_email(email)
        if credentials is None:
            logger.info("Sign-in rejected")
            raise UnauthorizedError(_INVALID_CREDENTIALS)

        if not self._password_hasher.verify(password, credentials.password_hash):
            logger.info("Sign-in rejected")
            raise UnauthorizedError(_INVALID_CREDENTIALS)

        return self._issue(credentials.to_user())

    def me(self, subject_id: int) -> User:
        """Resolve a token subject to the safe user projection.

        Raises:
            UnauthorizedError: If the user no longer exists
        """
        user = self._user_service.get(subject_id)
        if user is None:
            raise UnauthorizedError("User not found")
        return user

    def _issue(self, user: User) -> AccessToken:
        token = self._jwt_generator.generate_access_token(
            user_id=user.id, email=user.email, name=user.name
        )
        return AccessToken(access_token=token)
