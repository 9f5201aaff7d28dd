"""Password hashing utilities."""

import bcrypt

from src.catalog.core.errors import InvalidInputError
from src.catalog.runtime.config.config_data import SecurityConfig

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


class PasswordHasher:
    """One-way bcrypt hashing with a configurable cost factor."""

    def __init__(self, config: SecurityConfig | None = None):
        self._rounds = (config or SecurityConfig()).bcrypt_rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt with a fresh salt.

        Raises:
            InvalidInputError: If the password exceeds 72 bytes once encoded
        """
        if password_too_long(password):
            raise InvalidInputError(
                f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes"
            )
        return bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds)
        ).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against its bcrypt hash.

        A malformed hash or an over-long password counts as a mismatch.
        """
        if password_too_long(password):
            return False
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8")
            )
        except ValueError:
            return False
