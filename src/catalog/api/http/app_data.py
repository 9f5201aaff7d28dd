from dataclasses import dataclass

from src.catalog.core.security import PasswordHasher
from src.catalog.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
    StorageService,
)


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    storage_service: StorageService
    jwt_generation_service: JwtGeneratorService
    jwt_verify_service: JwtVerificationService
    password_hasher: PasswordHasher
