"""API tests for health endpoints and middleware."""

import json
from unittest.mock import patch

from fastapi.testclient import TestClient
from starlette.requests import Request

from src.catalog.api.http.app import handle_catalog_error
from src.catalog.core.errors import StorageError, UnauthorizedError
from src.catalog.core.services import DbSessionService


class TestHealth:
    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_ready(self, client: TestClient):
        assert client.get("/ready").json() == {
            "status": "ready",
            "checks": {"database": True, "storage": True},
        }

    def test_not_ready_when_database_unreachable(self, client: TestClient):
        with patch.object(DbSessionService, "health_check", return_value=False):
            response = client.get("/ready")

        assert response.status_code == 503
        assert response.json()["checks"]["database"] is False

    def test_not_ready_when_bucket_unreachable(self, client: TestClient, s3_client):
        s3_client.failing.add("HeadBucket")

        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json()["checks"] == {"database": True, "storage": False}


class TestMiddleware:
    def test_security_headers(self, client: TestClient):
        response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_request_id_is_echoed(self, client: TestClient):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    def test_error_body_carries_request_id(self, client: TestClient):
        response = client.get("/me", headers={"X-Request-ID": "req-1"})

        assert response.status_code == 401
        assert response.json()["request_id"] == "req-1"


class TestErrorMapping:
    """The CatalogError handler, exercised without a running app."""

    @staticmethod
    def _request() -> Request:
        return Request(
            {"type": "http", "method": "GET", "path": "/", "headers": [], "query_string": b""}
        )

    async def test_storage_error_is_bad_gateway(self):
        response = await handle_catalog_error(self._request(), StorageError())

        assert response.status_code == 502
        assert json.loads(response.body) == {
            "detail": "Object storage request failed",
            "request_id": None,
        }

    async def test_unauthorized_advertises_bearer(self):
        response = await handle_catalog_error(
            self._request(), UnauthorizedError("Invalid credentials")
        )

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
