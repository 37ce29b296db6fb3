"""
Tests for the product endpoints.
"""

import pytest

from clean_api.application import products as product_handlers

NEW_PRODUCT = {
    "name": "Widget",
    "description": "A useful widget",
    "price": 19.99,
    "stockQuantity": 10,
    "sku": "WIDGET-001",
    "isActive": True,
}


def create_product(client, headers, **overrides) -> int:
    response = client.post("/api/products", json={**NEW_PRODUCT, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["id"]


@pytest.fixture
def manager_headers(client, admin_headers, registered_user, login):
    response = client.post(
        f"/api/users/{registered_user['userId']}/roles",
        json={"roleName": "Manager"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    token = login("jane.doe@example.com", "Passw0rd!")["token"]
    return {"Authorization": f"Bearer {token}"}


class TestReadProducts:
    def test_list_seeded_products_anonymously(self, client):
        response = client.get("/api/products")

        assert response.status_code == 200
        body = response.json()
        assert [p["sku"] for p in body] == ["SAMPLE-001", "SAMPLE-002"]
        assert body[0]["price"] == 99.99
        assert body[0]["stockQuantity"] == 100
        assert body[0]["createdBy"] == "System"
        assert body[1]["price"] == 149.99

    def test_get_product(self, client):
        response = client.get("/api/products/1")
        assert response.status_code == 200
        assert response.json()["sku"] == "SAMPLE-001"

    def test_get_missing_product(self, client):
        response = client.get("/api/products/999")

        assert response.status_code == 404
        body = response.json()
        assert body["status"] == 404
        assert body["error"] == "Not Found"
        assert body["message"] == "Product (999) was not found"
        assert body["path"] == "/api/products/999"
        assert "timestamp" in body


class TestCreateProduct:
    def test_requires_authentication(self, client):
        response = client.post("/api/products", json=NEW_PRODUCT)

        assert response.status_code == 401
        assert response.json()["status"] == 401

    def test_requires_role(self, client, user_headers):
        response = client.post("/api/products", json=NEW_PRODUCT, headers=user_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"

    def test_invalid_token(self, client):
        response = client.post(
            "/api/products", json=NEW_PRODUCT, headers={"Authorization": "Bearer nonsense"}
        )
        assert response.status_code == 401

    def test_create_as_admin(self, client, admin_headers, admin_login):
        response = client.post("/api/products", json=NEW_PRODUCT, headers=admin_headers)

        assert response.status_code == 201
        product_id = response.json()["id"]
        assert response.headers["location"] == f"/api/products/{product_id}"

        created = client.get(f"/api/products/{product_id}").json()
        assert created["name"] == "Widget"
        assert created["price"] == 19.99
        assert created["createdBy"] == admin_login["userId"]
        assert created["modifiedBy"] is None

    def test_create_as_manager(self, client, manager_headers):
        create_product(client, manager_headers)

    def test_sequential_creates_have_increasing_ids(self, client, admin_headers):
        first = create_product(client, admin_headers, sku="A-1")
        second = create_product(client, admin_headers, sku="A-2")

        assert second > first
        ids = [p["id"] for p in client.get("/api/products").json()]
        assert first in ids and second in ids

    def test_validation_errors(self, client, admin_headers):
        response = client.post(
            "/api/products", json={**NEW_PRODUCT, "price": 0, "name": ""}, headers=admin_headers
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid Product"
        assert body["validationErrors"]["price"] == ["Price must be greater than 0"]
        assert body["validationErrors"]["name"] == ["Name is required"]

    def test_malformed_body(self, client, admin_headers):
        response = client.post(
            "/api/products", json={**NEW_PRODUCT, "price": "not-a-number"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert "price" in response.json()["validationErrors"]

    def test_duplicate_sku(self, client, admin_headers):
        response = client.post(
            "/api/products", json={**NEW_PRODUCT, "sku": "SAMPLE-001"}, headers=admin_headers
        )
        assert response.status_code == 400


class TestUpdateProduct:
    def test_update(self, client, admin_headers, admin_login):
        payload = {**NEW_PRODUCT, "id": 1, "name": "Renamed", "price": 10.5}

        response = client.put("/api/products/1", json=payload, headers=admin_headers)

        assert response.status_code == 204
        updated = client.get("/api/products/1").json()
        assert updated["name"] == "Renamed"
        assert updated["price"] == 10.5
        assert updated["createdBy"] == "System"
        assert updated["modifiedBy"] == admin_login["userId"]
        assert updated["dateModified"] is not None

    def test_id_mismatch_never_reaches_handler(self, client, admin_headers, monkeypatch):
        calls = []

        async def fake_handle(self, request):
            calls.append(request)

        monkeypatch.setattr(product_handlers.UpdateProductCommandHandler, "handle", fake_handle)

        response = client.put(
            "/api/products/1", json={**NEW_PRODUCT, "id": 2}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "ID mismatch"
        assert calls == []

    def test_update_missing(self, client, admin_headers):
        response = client.put(
            "/api/products/999", json={**NEW_PRODUCT, "id": 999}, headers=admin_headers
        )
        assert response.status_code == 404

    def test_update_requires_role(self, client, user_headers):
        response = client.put("/api/products/1", json={**NEW_PRODUCT, "id": 1}, headers=user_headers)
        assert response.status_code == 403


class TestDeleteProduct:
    def test_delete(self, client, admin_headers):
        response = client.delete("/api/products/2", headers=admin_headers)

        assert response.status_code == 204
        assert client.get("/api/products/2").status_code == 404
        assert [p["sku"] for p in client.get("/api/products").json()] == ["SAMPLE-001"]

    def test_delete_missing(self, client, admin_headers):
        assert client.delete("/api/products/999", headers=admin_headers).status_code == 404

    def test_delete_requires_authentication(self, client):
        assert client.delete("/api/products/1").status_code == 401

    def test_delete_forbidden_for_manager(self, client, manager_headers):
        response = client.delete("/api/products/1", headers=manager_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"
        assert client.get("/api/products/1").status_code == 200

    def test_delete_forbidden_for_user(self, client, user_headers):
        assert client.delete("/api/products/1", headers=user_headers).status_code == 403
        assert client.get("/api/products/1").status_code == 200
