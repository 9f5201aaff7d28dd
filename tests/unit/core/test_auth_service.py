"""Unit tests for sign-up, sign-in and current-user resolution."""

import pytest

from src.catalog.core.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from src.catalog.core.services import (
    AuthService,
    JwtVerificationService,
    UserManagementService,
)


class TestAuthService:
    def test_sign_up_issues_token_for_new_user(
        self, auth_service: AuthService, jwt_verify_service: JwtVerificationService
    ):
        token = auth_service.sign_up("Ana", "ana@example.com", "s3cret")

        claims = jwt_verify_service.verify_jwt(token.access_token)
        assert claims.email == "ana@example.com"
        assert claims.name == "Ana"

    def test_sign_up_stores_only_a_hash(
        self, auth_service: AuthService, user_management_service: UserManagementService
    ):
        auth_service.sign_up("Ana", "ana@example.com", "s3cret")

        credentials = user_management_service.get_by_email("ana@example.com")
        assert credentials.password_hash != "s3cret"
        assert credentials.password_hash.startswith("$2")

    def test_sign_up_duplicate_email_conflicts(self, auth_service: AuthService):
        auth_service.sign_up("Ana", "ana@example.com", "s3cret")

        with pytest.raises(ConflictError, match="already exists"):
            auth_service.sign_up("Other Ana", "ana@example.com", "different")

    def test_sign_in_returns_token_for_same_subject(
        self, auth_service: AuthService, jwt_verify_service: JwtVerificationService
    ):
        signed_up = auth_service.sign_up("Ana", "ana@example.com", "s3cret")

        signed_in = auth_service.sign_in("ana@example.com", "s3cret")

        first = jwt_verify_service.verify_jwt(signed_up.access_token)
        second = jwt_verify_service.verify_jwt(signed_in.access_token)
        assert first.subject == second.subject

    def test_unknown_email_and_wrong_password_look_the_same(
        self, auth_service: AuthService
    ):
        auth_service.sign_up("Ana", "ana@example.com", "s3cret")

        with pytest.raises(UnauthorizedError) as unknown:
            auth_service.sign_in("nobody@example.com", "s3cret")
        with pytest.raises(UnauthorizedError) as wrong:
            auth_service.sign_in("ana@example.com", "wrong")

        assert unknown.value.message == wrong.value.message == "Invalid credentials"

    def test_me_returns_safe_projection(
        self, auth_service: AuthService, jwt_verify_service: JwtVerificationService
    ):
        token = auth_service.sign_up("Ana", "ana@example.com", "s3cret")
        claims = jwt_verify_service.verify_jwt(token.access_token)

        user = auth_service.me(claims.subject)

        assert user.id == claims.subject
        assert user.email == "ana@example.com"
        assert "password_hash" not in user.model_dump()

    def test_me_for_deleted_user_is_unauthorized(
        self,
        auth_service: AuthService,
        user_management_service: UserManagementService,
        jwt_verify_service: JwtVerificationService,
    ):
        token = auth_service.sign_up("Ana", "ana@example.com", "s3cret")
        subject = jwt_verify_service.verify_jwt(token.access_token).subject
        user_management_service.remove(subject)

        with pytest.raises(UnauthorizedError, match="User not found"):
            auth_service.me(subject)


class TestUserManagementService:
    def test_update_profile_and_password(
        self, user_management_service: UserManagementService, auth_service: AuthService
    ):
        user = user_management_service.create("Ana", "ana@example.com", "old")

        updated = user_management_service.update(
            user.id, name="Ana Maria", password="new"
        )

        assert updated.name == "Ana Maria"
        assert updated.email == "ana@example.com"
        auth_service.sign_in("ana@example.com", "new")
        with pytest.raises(UnauthorizedError):
            auth_service.sign_in("ana@example.com", "old")

    def test_update_to_taken_email_conflicts(
        self, user_management_service: UserManagementService
    ):
        user_management_service.create("Ana", "ana@example.com", "pw")
        bo = user_management_service.create("Bo", "bo@example.com", "pw")

        with pytest.raises(ConflictError):
            user_management_service.update(bo.id, email="ana@example.com")

    def test_over_long_password_rejected_on_update(
        self, user_management_service: UserManagementService, auth_service: AuthService
    ):
        user = user_management_service.create("Ana", "ana@example.com", "pw")

        with pytest.raises(InvalidInputError):
            user_management_service.update(user.id, password="x" * 80)

        auth_service.sign_in("ana@example.com", "pw")

    def test_update_and_remove_missing_user(
        self, user_management_service: UserManagementService
    ):
        with pytest.raises(NotFoundError):
            user_management_service.update(99, name="Ghost")
        with pytest.raises(NotFoundError):
            user_management_service.remove(99)

    def test_list(self, user_management_service: UserManagementService):
        user_management_service.create("Ana", "ana@example.com", "pw")
        user_management_service.create("Bo", "bo@example.com", "pw")

        assert [u.email for u in user_management_service.list()] == [
            "ana@example.com",
            "bo@example.com",
        ]
