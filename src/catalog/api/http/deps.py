"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.core.errors import UnauthorizedError
from src.catalog.core.models.claims import TokenClaims
from src.catalog.core.security import PasswordHasher
from src.catalog.core.services import (
    AuthService,
    JwtGeneratorService,
    JwtVerificationService,
    ProductCatalogService,
    StorageService,
    UserManagementService,
)


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session that is closed once the request finishes."""
    app_deps = get_app_dependencies(request)
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_storage_service(request: Request) -> StorageService:
    """Get the object storage service instance."""
    return get_app_dependencies(request).storage_service


def get_jwt_verify_service(request: Request) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    return get_app_dependencies(request).jwt_verify_service


def get_jwt_generation_service(request: Request) -> JwtGeneratorService:
    """Get the JWT generation service instance."""
    return get_app_dependencies(request).jwt_generation_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return get_app_dependencies(request).password_hasher


def get_user_management_service(
    db_session: Session = Depends(get_db_session),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserManagementService:
    return UserManagementService(db_session, password_hasher)


def get_auth_service(
    user_service: UserManagementService = Depends(get_user_management_service),
    jwt_generator: JwtGeneratorService = Depends(get_jwt_generation_service),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    return AuthService(user_service, jwt_generator, password_hasher)


def get_product_catalog_service(
    db_session: Session = Depends(get_db_session),
    storage: StorageService = Depends(get_storage_service),
) -> ProductCatalogService:
    return ProductCatalogService(db_session, storage)


def get_current_claims(
    request: Request,
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> TokenClaims:
    """Authenticate the request using a Bearer token."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.lower().startswith("bearer "):
        raise UnauthorizedError("Missing Bearer token")

    token = auth_header.split(" ", 1)[1].strip()
    if not token:
        raise UnauthorizedError("Missing Bearer token")

    claims = jwt_verify.verify_jwt(token)
    request.state.claims = claims
    return claims
