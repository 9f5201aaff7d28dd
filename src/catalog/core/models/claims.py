"""Access token models."""

from pydantic import BaseModel, Field


class TokenClaims(BaseModel):
    """Decoded payload of a verified access token."""

    subject: int = Field(description="User ID (sub claim)")
    email: str = Field(description="User email at issuance time")
    name: str = Field(description="User display name at issuance time")
    issued_at: int | None = Field(default=None, description="iat claim")
    expires_at: int | None = Field(default=None, description="exp claim")
    issuer: str | None = Field(default=None, description="iss claim")


class AccessToken(BaseModel):
    """Bearer token returned by sign-up and sign-in."""

    access_token: str
