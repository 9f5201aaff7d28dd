import time
from typing import Any

from authlib.jose import JoseError, jwt
from loguru import logger

from src.catalog.core.errors import CatalogError
from src.catalog.runtime.config.config_data import JWTConfig


class JwtGeneratorService:
    """Service for generating JWT access tokens."""

    def __init__(self, config: JWTConfig):
        self._config = config

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int | None = None,
    ) -> str:
        """Generate a signed JWT using authlib.

        Args:
            subject: Subject (sub) claim - the user ID
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime; defaults to the configured expiry

        Returns:
            Signed JWT token string

        Raises:
            CatalogError: If the signing secret is missing or encoding fails
        """
        secret = self._config.secret
        if not secret:
            raise CatalogError("JWT signing secret not configured")

        now = int(time.time())
        lifetime = (
            self._config.expires_in_seconds
            if expires_in_seconds is None
            else expires_in_seconds
        )

        payload = {
            "iss": self._config.issuer,
            "sub": subject,
            "iat": now,
            "exp": now + lifetime,
        }

        # Registered claims always come from the arguments above
        if claims:
            payload.update(
                {k: v for k, v in claims.items() if k not in {"iss", "sub", "iat", "exp"}}
            )

        try:
            header = {"alg": self._config.algorithm, "typ": "JWT"}
            token = jwt.encode(header, payload, secret)
            return token.decode() if isinstance(token, bytes) else token
        except JoseError as e:
            logger.error("JWT encoding failed: {}", e)
            raise CatalogError("Failed to generate access token") from e

    def generate_access_token(self, user_id: int, email: str, name: str) -> str:
        """Generate an access token carrying ``{sub, email, name}``.

        Example:
            token = generator.generate_access_token(7, "ana@example.com", "Ana")
        """
        return self.generate_jwt(
            subject=str(user_id),
            claims={"email": email, "name": name},
        )
