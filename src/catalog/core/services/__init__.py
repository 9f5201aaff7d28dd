"""Core services exports."""

# Auth Services
from .auth.auth_service import AuthService

# Database Service
from .database.db_session import DbSessionService
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import JwtVerificationService

# Catalog Services
from .product.product_catalog import ImageUpload, ProductCatalogService
from .storage.storage_service import StorageService

# User Services
from .user.user_management import UserManagementService

__all__ = [
    # JWT Services
    "JwtGeneratorService",
    "JwtVerificationService",
    # Auth Services
    "AuthService",
    # User Services
    "UserManagementService",
    # Catalog Services
    "ImageUpload",
    "ProductCatalogService",
    "StorageService",
    # Database Service
    "DbSessionService",
]
