"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.api.http.routers.auth import router as auth_router
from src.catalog.api.http.routers.service.product import router as product_router
from src.catalog.api.utils.app_startup import configure_logging
from src.catalog.core.errors import CatalogError
from src.catalog.core.security import PasswordHasher
from src.catalog.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
    StorageService,
)
from src.catalog.runtime.context import get_config


_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}
_HSTS = "max-age=31536000; includeSubDomains; preload"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds browser hardening headers; HSTS only in production."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in _SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if get_config().app.environment == "production":
            response.headers.setdefault("Strict-Transport-Security", _HSTS)
        return response


def _client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def log_requests(request: Request, call_next):
    """Tag every log record of a request with its id and log its outcome."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    started = time.perf_counter()

    def elapsed_ms() -> float:
        return round((time.perf_counter() - started) * 1000, 1)

    with logger.contextualize(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        client_ip=_client_ip(request),
    ):
        logger.info("request.start")
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.bind(
                status_code=500, duration_ms=elapsed_ms(), error_type=type(exc).__name__
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        logger.bind(status_code=response.status_code, duration_ms=elapsed_ms()).info(
            "request.end"
        )
        response.headers.setdefault("X-Request-ID", request_id)
        return response


async def handle_catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
    """Map a domain error to its HTTP status with a readable message."""
    request_id = getattr(request.state, "request_id", None)
    log = logger.bind(status_code=exc.status_code, error_type=type(exc).__name__)
    if exc.status_code >= 500:
        log.error("request.failed: {}", exc.message)
    else:
        log.info("request.rejected: {}", exc.message)

    headers = {"X-Request-ID": request_id} if request_id else None
    if exc.status_code == 401:
        headers = {**(headers or {}), "WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "request_id": request_id},
        headers=headers,
    )


# --- Lifecycle hooks ---
def build_dependencies() -> ApplicationDependencies:
    """Build application-wide services from the current configuration."""
    config = get_config()

    database_service = DbSessionService(config)
    if config.database.create_tables:
        database_service.create_all()

    storage_service = StorageService(config.storage)
    if config.storage.bootstrap:
        storage_service.bootstrap()

    if not config.jwt.secret:
        logger.warning("JWT secret is not configured; sign-in will fail")

    return ApplicationDependencies(
        database_service=database_service,
        storage_service=storage_service,
        jwt_generation_service=JwtGeneratorService(config.jwt),
        jwt_verify_service=JwtVerificationService(config.jwt),
        password_hasher=PasswordHasher(config.security),
    )


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Create the API application.

    Args:
        dependencies: Pre-built services. When omitted they are built from
            configuration at startup, which also configures logging.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if dependencies is None:
            configure_logging()
            logger.info(
                "Starting up application in {} environment",
                get_config().app.environment,
            )
            app.state.app_dependencies = await run_in_threadpool(build_dependencies)
        else:
            app.state.app_dependencies = dependencies
        try:
            yield
        finally:
            logger.info("Shutting down application")
            if dependencies is None:
                app.state.app_dependencies.database_service.dispose()

    config = get_config()
    is_production = config.app.environment == "production"

    app = FastAPI(
        title="Product Catalog API",
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )

    app.add_middleware(SecurityHeadersMiddleware)

    if is_production and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.middleware("http")(log_requests)
    app.add_exception_handler(CatalogError, handle_catalog_error)

    # --- Router registration ---
    app.include_router(auth_router)
    app.include_router(product_router, prefix="/products", tags=["products"])

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/ready")
    async def readiness(request: Request) -> JSONResponse:
        """Readiness check endpoint."""
        deps: ApplicationDependencies = request.app.state.app_dependencies
        checks = {
            "database": await run_in_threadpool(deps.database_service.health_check),
            "storage": await run_in_threadpool(deps.storage_service.health_check),
        }
        ready = all(checks.values())
        return JSONResponse(
            status_code=200 if ready else 503,
            content={"status": "ready" if ready else "unavailable", "checks": checks},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_config()
    uvicorn.run(
        app,
        host=config.app.host,
        port=config.app.port,
        access_log=False,  # We handle access logging in middleware
    )
