"""Smoke tests for the assembled application."""

import pytest
from fastapi.testclient import TestClient

from storefront.auth import get_token_resolver
from storefront.auth.actor import Actor


@pytest.fixture()
def client():
    from app import app

    return TestClient(app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "domain": "storefront"}


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_routes_are_mounted(client):
    get_token_resolver().register("admin-token", Actor(user_id="admin-001", role="admin"))
    response = client.get("/orders", headers={"Authorization": "Bearer admin-token"})
    assert response.status_code == 200
    assert response.json()["data"] == []
