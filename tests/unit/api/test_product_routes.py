"""API tests for the product endpoints."""

import re

import pytest
from fastapi.testclient import TestClient

from tests.fixtures.storage import FakeS3Client

CHAIR_FORM = {
    "name": "Chair",
    "category": "Furniture",
    "price": "199.90",
    "stock": "10",
    "volume": "0.5",
    "weight": "",
}


def _image(name: str = "chair.png") -> dict:
    return {"image": (name, b"png-bytes", "image/png")}


@pytest.fixture
def create_product(client: TestClient, auth_headers: dict[str, str]):
    def _create(form: dict | None = None, files: dict | None = None) -> dict:
        response = client.post(
            "/products", data=form or CHAIR_FORM, files=files, headers=auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


class TestProductAuth:
    def test_routes_require_token(self, client: TestClient):
        assert client.get("/products").status_code == 401
        assert client.get("/products/1").status_code == 401
        assert client.post("/products", data=CHAIR_FORM).status_code == 401
        assert client.delete("/products/1").status_code == 401


class TestCreateProduct:
    def test_create_with_image(self, create_product, s3_client: FakeS3Client):
        product = create_product(files=_image())

        assert product["name"] == "Chair"
        assert product["price"] == pytest.approx(199.9)
        assert product["stock"] == 10
        assert product["volume"] == pytest.approx(0.5)
        assert product["weight"] is None
        assert re.fullmatch(r"products/\d{13}-chair\.png", product["imageKey"])
        assert product["imageUrl"] == (
            f"http://minio.test:9000/test-products/{product['imageKey']}"
        )
        assert s3_client.objects[product["imageKey"]]["Body"] == b"png-bytes"

    def test_create_without_image(self, create_product):
        product = create_product()

        assert product["imageKey"] is None
        assert product["imageUrl"] is None

    @pytest.mark.parametrize(
        "field, value",
        [
            ("price", "0"),
            ("price", "abc"),
            ("price", "0.001"),
            ("price", "100000000"),
            ("stock", "-1"),
            ("stock", "2147483648"),
            ("name", ""),
            ("volume", "0"),
            ("weight", "1.005"),
        ],
    )
    def test_invalid_fields_rejected(
        self,
        client: TestClient,
        auth_headers,
        s3_client: FakeS3Client,
        field,
        value,
    ):
        form = {**CHAIR_FORM, field: value}

        response = client.post(
            "/products", data=form, files=_image(), headers=auth_headers
        )

        assert response.status_code == 422
        assert s3_client.objects == {}


class TestListProducts:
    @pytest.fixture
    def catalog(self, create_product):
        for name, category, price in [
            ("Chair", "Furniture", "199.90"),
            ("Table", "Furniture", "300"),
            ("Lamp", "Lighting", "45"),
        ]:
            create_product({"name": name, "category": category, "price": price, "stock": "1"})

    def test_search_sort_and_paginate(self, client: TestClient, auth_headers, catalog):
        response = client.get(
            "/products",
            params={"search": "furn", "sortBy": "price", "sortOrder": "desc", "limit": 1},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Table"]

    def test_category_filter(self, client: TestClient, auth_headers, catalog):
        response = client.get(
            "/products", params={"category": "Lighting"}, headers=auth_headers
        )

        assert [p["name"] for p in response.json()] == ["Lamp"]

    def test_second_page(self, client: TestClient, auth_headers, catalog):
        response = client.get(
            "/products",
            params={"sortBy": "price", "page": 2, "limit": 2},
            headers=auth_headers,
        )

        assert [p["name"] for p in response.json()] == ["Table"]

    @pytest.mark.parametrize(
        "params",
        [{"page": 0}, {"limit": 0}, {"limit": 101}, {"sortBy": "stock"}, {"sortOrder": "up"}],
    )
    def test_invalid_query_rejected(self, client: TestClient, auth_headers, params):
        response = client.get("/products", params=params, headers=auth_headers)

        assert response.status_code == 422


class TestProductById:
    def test_get(self, client: TestClient, auth_headers, create_product):
        created = create_product(files=_image())

        response = client.get(f"/products/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == created

    def test_get_missing(self, client: TestClient, auth_headers):
        response = client.get("/products/999", headers=auth_headers)

        assert response.status_code == 404

    def test_partial_update(self, client: TestClient, auth_headers, create_product):
        created = create_product(files=_image())

        response = client.put(
            f"/products/{created['id']}", data={"price": "149.90"}, headers=auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["price"] == pytest.approx(149.9)
        assert body["name"] == "Chair"
        assert body["imageKey"] == created["imageKey"]

    def test_update_replaces_image(
        self, client: TestClient, auth_headers, create_product, s3_client: FakeS3Client
    ):
        created = create_product(files=_image("old.png"))

        response = client.put(
            f"/products/{created['id']}",
            data={"stock": "3"},
            files=_image("new.png"),
            headers=auth_headers,
        )

        body = response.json()
        assert response.status_code == 200
        assert body["stock"] == 3
        assert body["imageKey"].endswith("-new.png")
        assert list(s3_client.objects) == [body["imageKey"]]

    def test_update_missing(self, client: TestClient, auth_headers, s3_client: FakeS3Client):
        response = client.put(
            "/products/999", data={"name": "X"}, files=_image(), headers=auth_headers
        )

        assert response.status_code == 404
        assert s3_client.objects == {}

    def test_delete(
        self, client: TestClient, auth_headers, create_product, s3_client: FakeS3Client
    ):
        created = create_product(files=_image())

        response = client.delete(f"/products/{created['id']}", headers=auth_headers)

        assert response.status_code == 204
        assert client.get(f"/products/{created['id']}", headers=auth_headers).status_code == 404
        assert s3_client.objects == {}

    def test_delete_missing(self, client: TestClient, auth_headers):
        response = client.delete("/products/999", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"
