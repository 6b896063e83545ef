"""Integration tests for the admin product endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.api.errors import register_exception_handlers
from storefront.api.routes import product_router
from storefront.auth import get_token_resolver
from storefront.auth.actor import Actor

ADMIN = {"Authorization": "Bearer admin-token"}
CUSTOMER = {"Authorization": "Bearer customer-token"}


@pytest.fixture()
def client():
    resolver = get_token_resolver()
    resolver.register("admin-token", Actor(user_id="admin-001", role="super-admin"))
    resolver.register("customer-token", Actor(user_id="cust-001"))

    app = FastAPI()
    app.include_router(product_router)
    register_exception_handlers(app)
    return TestClient(app)


def _create(client, **overrides):
    body = {
        "name": "Kenya AA",
        "description": "Bright, winey and full bodied",
        "category": "coffee-beans",
        "sizes": [{"size": "250g", "price": 500.0}, {"size": "500g", "price": 950.0}],
        "stock": 20,
        "lowStockAlert": 5,
    }
    body.update(overrides)
    response = client.post("/products", json=body, headers=ADMIN)
    assert response.status_code == 201, response.json()
    return response.json()["data"]


class TestCreateProductEndpoint:
    def test_create(self, client):
        data = _create(client)
        assert data["name"] == "Kenya AA"
        assert data["inStock"] is True
        assert data["lowStockThreshold"] == 5
        assert sorted(s["size"] for s in data["sizes"]) == ["250g", "500g"]

    def test_customers_forbidden(self, client):
        response = client.post("/products", json={"name": "x", "description": "y"}, headers=CUSTOMER)
        assert response.status_code == 403

    def test_invalid_size(self, client):
        response = client.post(
            "/products",
            json={"name": "Kenya AA", "description": "Beans", "sizes": [{"size": "2kg", "price": 10.0}]},
            headers=ADMIN,
        )
        assert response.status_code == 400


class TestStockEndpoints:
    def test_adjust_stock(self, client):
        product = _create(client, stock=0)
        response = client.put(f"/products/{product['id']}/stock", json={"stock": 40}, headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["data"]["stock"] == 40
        assert response.json()["data"]["inStock"] is True

    def test_low_stock_listing(self, client):
        _create(client, name="Plenty", stock=40)
        _create(client, name="Scarce", stock=2)

        response = client.get("/products/low-stock", headers=ADMIN)
        assert response.status_code == 200
        assert [p["name"] for p in response.json()["data"]] == ["Scarce"]

    def test_deactivate(self, client):
        product = _create(client)
        response = client.put(f"/products/{product['id']}/deactivate", headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["data"]["isActive"] is False

    def test_unknown_product(self, client):
        response = client.put(
            "/products/00000000-0000-4000-8000-000000000000/stock",
            json={"stock": 1},
            headers=ADMIN,
        )
        assert response.status_code == 404
