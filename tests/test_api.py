"""Integration tests for the cart and order endpoints via TestClient."""

import pytest
from fastapi.testclient import TestClient

from storefront.api import create_app
from storefront.api.routers.carts import get_cart_repo
from storefront.data.database import get_db
from storefront.utils.settings import SESSION_COOKIE_NAME


@pytest.fixture
def client(db, cart_repo, catalog):
    app = create_app()
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_cart_repo] = lambda: cart_repo
    return TestClient(app)


class TestCartEndpoints:
    def test_anonymous_cart_gets_session_cookie(self, client):
        response = client.post("/cart/items", json={"product_id": 1, "quantity": 2})
        assert response.status_code == 200
        assert SESSION_COOKIE_NAME in response.cookies

        body = response.json()
        assert body["line_count"] == 2
        assert body["total"] == "100.00"

        # ta sama sesja przy kolejnym zapytaniu
        assert client.get("/cart").json()["line_count"] == 2

    def test_user_cart(self, client):
        client.post("/cart/items?user_id=1", json={"product_id": 2, "quantity": 1})
        response = client.patch("/cart/items/2?user_id=1", json={"quantity": 3})
        assert response.status_code == 200
        assert response.json()["lines"][0]["quantity"] == 3

    def test_update_to_zero_removes(self, client):
        client.post("/cart/items?user_id=1", json={"product_id": 2, "quantity": 1})
        response = client.patch("/cart/items/2?user_id=1", json={"quantity": 0})
        assert response.json()["lines"] == []

    def test_remove_and_clear(self, client, fake_redis):
        client.post("/cart/items?user_id=1", json={"product_id": 1, "quantity": 1})
        client.post("/cart/items?user_id=1", json={"product_id": 2, "quantity": 1})

        response = client.delete("/cart/items/1?user_id=1")
        assert [line["product_id"] for line in response.json()["lines"]] == [2]

        assert client.delete("/cart?user_id=1").status_code == 204
        assert "cart:user:1" not in fake_redis.store

    def test_clear_anonymous_cart_sets_session_cookie(self, client):
        response = client.delete("/cart")
        assert response.status_code == 204
        assert SESSION_COOKIE_NAME in response.cookies

    def test_insufficient_stock(self, client):
        response = client.post("/cart/items?user_id=1", json={"product_id": 3, "quantity": 2})
        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "INSUFFICIENT_STOCK"
        assert body["available"] == 1
        assert body["requested"] == 2

    def test_unknown_product(self, client):
        response = client.post("/cart/items?user_id=1", json={"product_id": 99, "quantity": 1})
        assert response.status_code == 404

    def test_quantity_limits(self, client):
        response = client.post("/cart/items?user_id=1", json={"product_id": 1, "quantity": 101})
        assert response.status_code == 422

    def test_merge_after_login(self, client, fake_redis):
        client.post("/cart/items", json={"product_id": 1, "quantity": 1})
        client.post("/cart/items?user_id=1", json={"product_id": 1, "quantity": 2})

        response = client.post("/cart/merge?user_id=1")
        assert response.status_code == 200
        assert response.json()["lines"][0]["quantity"] == 3
        assert not any(key.startswith("cart:session:") for key in fake_redis.store)

    def test_merge_without_session(self, client):
        response = client.post("/cart/merge?user_id=1")
        assert response.status_code == 400
        assert response.json()["code"] == "IDENTITY_REQUIRED"


class TestOrderEndpoints:
    def test_create_and_fetch_order(self, client):
        response = client.post("/orders?user_id=1", json={"items": [{"product_id": 1, "quantity": 2}]})
        assert response.status_code == 201
        body = response.json()
        assert body["order"]["status"] == "PENDING"
        assert body["order"]["total"] == "100.00"
        assert body["lines"][0]["unit_price"] == "50.00"

        order_id = body["order"]["id"]
        assert client.get(f"/orders/{order_id}?user_id=1").status_code == 200
        assert client.get(f"/orders/{order_id}?user_id=2").status_code == 404

    def test_unknown_customer(self, client):
        response = client.post("/orders?user_id=999", json={"items": [{"product_id": 1, "quantity": 1}]})
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_empty_order_rejected(self, client):
        response = client.post("/orders?user_id=1", json={"items": []})
        assert response.status_code == 422

    def test_checkout(self, client, fake_redis):
        client.post("/cart/items?user_id=1", json={"product_id": 2, "quantity": 2})
        response = client.post("/orders/checkout?user_id=1")
        assert response.status_code == 201
        assert response.json()["order"]["total"] == "40.00"
        assert "cart:user:1" not in fake_redis.store

    def test_checkout_empty_cart(self, client):
        response = client.post("/orders/checkout?user_id=1")
        assert response.status_code == 400

    def test_status_transitions(self, client):
        order_id = client.post(
            "/orders?user_id=1", json={"items": [{"product_id": 1, "quantity": 1}]}
        ).json()["order"]["id"]

        response = client.patch(f"/orders/{order_id}/status", json={"status": "SHIPPED"})
        assert response.status_code == 409
        assert response.json()["current"] == "PENDING"

        response = client.patch(f"/orders/{order_id}/status", json={"status": "PROCESSING"})
        assert response.status_code == 200
        assert response.json()["order"]["status"] == "PROCESSING"

    def test_listing_and_stats(self, client):
        client.post("/orders?user_id=1", json={"items": [{"product_id": 1, "quantity": 1}]})
        client.post("/orders?user_id=2", json={"items": [{"product_id": 2, "quantity": 1}]})

        mine = client.get("/orders?user_id=1").json()
        assert mine["pagination"]["total"] == 1

        everything = client.get("/orders/admin/all").json()
        assert everything["pagination"]["total"] == 2

        stats = client.get("/orders/admin/stats").json()
        assert stats["total_orders"] == 2
        assert stats["pending_orders"] == 2


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
