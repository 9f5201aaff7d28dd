"""JWT verification service."""

import time

from authlib.jose import JoseError, jwt
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from src.catalog.core.errors import CatalogError, UnauthorizedError
from src.catalog.core.models.claims import TokenClaims
from src.catalog.runtime.config.config_data import JWTConfig

_INVALID_TOKEN = "Invalid or expired token"


class JwtVerificationService:
    def __init__(self, config: JWTConfig):
        self._config = config

    def verify_jwt(self, token: str) -> TokenClaims:
        """Verify the signature and lifetime of an access token.

        Raises:
            UnauthorizedError: For any malformed, forged or expired token
        """
        secret = self._config.secret
        if not secret:
            raise CatalogError("JWT signing secret not configured")

        claims_options = {
            "exp": {"essential": True},
            "sub": {"essential": True},
            "iss": {"essential": True, "value": self._config.issuer},
        }

        try:
            claims = jwt.decode(token, secret, claims_options=claims_options)
            claims.validate(leeway=self._config.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("JWT rejected: {}", exc)
            raise UnauthorizedError(_INVALID_TOKEN) from exc

        if claims.header.get("alg") != self._config.algorithm:
            raise UnauthorizedError(_INVALID_TOKEN)

        # extra temporal sanity
        now = int(time.time())
        iat = claims.get("iat")
        if iat is not None and int(iat) > now + self._config.clock_skew:
            raise UnauthorizedError(_INVALID_TOKEN)

        try:
            return TokenClaims(
                subject=int(claims["sub"]),
                email=claims.get("email"),
                name=claims.get("name"),
                issued_at=iat,
                expires_at=claims.get("exp"),
                issuer=claims.get("iss"),
            )
        except (PydanticValidationError, ValueError, TypeError) as exc:
            raise UnauthorizedError(_INVALID_TOKEN) from exc
