"""Unit tests for access token generation and verification."""

import time

import pytest
from authlib.jose import jwt

from src.catalog.core.errors import CatalogError, UnauthorizedError
from src.catalog.core.services import JwtGeneratorService, JwtVerificationService
from src.catalog.runtime.config.config_data import JWTConfig


class TestJwtServices:
    def test_round_trip_claims(
        self,
        jwt_generate_service: JwtGeneratorService,
        jwt_verify_service: JwtVerificationService,
    ):
        token = jwt_generate_service.generate_access_token(7, "ana@example.com", "Ana")

        claims = jwt_verify_service.verify_jwt(token)

        assert claims.subject == 7
        assert claims.email == "ana@example.com"
        assert claims.name == "Ana"
        assert claims.issuer == "catalog-test"
        assert claims.expires_at - claims.issued_at == 3600

    def test_expired_token_rejected(
        self,
        jwt_generate_service: JwtGeneratorService,
        jwt_verify_service: JwtVerificationService,
    ):
        # Expired well beyond the clock skew tolerance
        token = jwt_generate_service.generate_jwt(
            "7", {"email": "a@b.c", "name": "A"}, expires_in_seconds=-3600
        )

        with pytest.raises(UnauthorizedError, match="Invalid or expired token"):
            jwt_verify_service.verify_jwt(token)

    def test_token_signed_with_other_secret_rejected(
        self, jwt_config: JWTConfig, jwt_verify_service: JwtVerificationService
    ):
        forged = JwtGeneratorService(
            jwt_config.model_copy(update={"secret": "another-secret"})
        ).generate_access_token(7, "a@b.c", "A")

        with pytest.raises(UnauthorizedError):
            jwt_verify_service.verify_jwt(forged)

    def test_tampered_payload_rejected(
        self,
        jwt_generate_service: JwtGeneratorService,
        jwt_verify_service: JwtVerificationService,
    ):
        header, payload, signature = jwt_generate_service.generate_access_token(
            7, "a@b.c", "A"
        ).split(".")
        tampered = ".".join([header, payload[:-2] + "xx", signature])

        with pytest.raises(UnauthorizedError):
            jwt_verify_service.verify_jwt(tampered)

    def test_wrong_issuer_rejected(
        self, jwt_config: JWTConfig, jwt_verify_service: JwtVerificationService
    ):
        token = JwtGeneratorService(
            jwt_config.model_copy(update={"issuer": "someone-else"})
        ).generate_access_token(7, "a@b.c", "A")

        with pytest.raises(UnauthorizedError):
            jwt_verify_service.verify_jwt(token)

    def test_non_numeric_subject_rejected(
        self, jwt_config: JWTConfig, jwt_verify_service: JwtVerificationService
    ):
        now = int(time.time())
        token = jwt.encode(
            {"alg": "HS256"},
            {
                "iss": jwt_config.issuer,
                "sub": "not-a-number",
                "iat": now,
                "exp": now + 60,
                "email": "a@b.c",
                "name": "A",
            },
            jwt_config.secret,
        ).decode()

        with pytest.raises(UnauthorizedError):
            jwt_verify_service.verify_jwt(token)

    def test_garbage_rejected(self, jwt_verify_service: JwtVerificationService):
        with pytest.raises(UnauthorizedError):
            jwt_verify_service.verify_jwt("not.a.jwt")

    def test_missing_secret_cannot_sign(self):
        with pytest.raises(CatalogError, match="secret not configured"):
            JwtGeneratorService(JWTConfig()).generate_access_token(1, "a@b.c", "A")
