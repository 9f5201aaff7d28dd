"""Sign-up, sign-in and current-user endpoints."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field, field_validator

from src.catalog.api.http.deps import get_auth_service, get_current_claims
from src.catalog.core.models.claims import AccessToken, TokenClaims
from src.catalog.core.security import MAX_PASSWORD_BYTES, password_too_long
from src.catalog.core.services import AuthService
from src.catalog.entities.core.user import User

router = APIRouter(tags=["auth"])


class _PasswordRequest(BaseModel):
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        if password_too_long(value):
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class SignUpRequest(_PasswordRequest):
    name: str = Field(min_length=1, description="Display name")
    email: EmailStr


class SignInRequest(_PasswordRequest):
    email: EmailStr


@router.post(
    "/sign-up", response_model=AccessToken, status_code=status.HTTP_201_CREATED
)
def sign_up(
    body: SignUpRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AccessToken:
    """Register a new account and return its access token."""
    return auth_service.sign_up(body.name, body.email, body.password)


@router.post("/sign-in", response_model=AccessToken)
def sign_in(
    body: SignInRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AccessToken:
    """Exchange email and password for an access token."""
    return auth_service.sign_in(body.email, body.password)


@router.get("/me", response_model=User)
def me(
    claims: TokenClaims = Depends(get_current_claims),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Return the authenticated user without the password hash."""
    return auth_service.me(claims.subject)
