"""Token models."""

from .claims import AccessToken, TokenClaims

__all__ = ["AccessToken", "TokenClaims"]
