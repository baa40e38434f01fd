"""Tests for the HTTP API."""

import re

import pytest
from sqlmodel import select

from app.models.order import Order
from app.models.product import Product
from app.utils.token import create_access_token


@pytest.fixture
def place(client, auth_headers, shipping_address):
    def _place(user, payment_method="card", **overrides):
        body = {"shipping_address": shipping_address, "payment_method": payment_method}
        body.update(overrides)
        return client.post("/api/v1/orders", json=body, headers=auth_headers(user))

    return _place


class TestHealthCheck:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["db"] == "connected"

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/v1/nowhere")

        assert response.status_code == 404
        assert response.json()["success"] is False
        assert response.json()["error"] == "not_found"

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["success"] is True


class TestAuthentication:
    def test_missing_token(self, client):
        response = client.get("/api/v1/orders")
        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": "unauthorized",
            "message": "Not authenticated",
        }
        assert response.headers["www-authenticate"] == "Bearer"

    def test_garbage_token(self, client):
        response = client.get("/api/v1/orders", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"
        assert response.json()["message"] == "Could not validate credentials"

    def test_unknown_user(self, client):
        token = create_access_token({"sub": "4242"})
        response = client.get("/api/v1/orders", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    def test_disabled_user(self, client, session, user, auth_headers):
        user.can_login = False
        session.add(user)
        session.commit()

        response = client.get("/api/v1/orders", headers=auth_headers(user))
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"
        assert response.json()["message"] == "User account is disabled"


class TestCreateOrder:
    def test_small_order(self, client, place, session, user, make_product, fill_cart, auth_headers):
        product = make_product(price=60, stock=5)
        fill_cart(user, (product, 1))

        response = place(user)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert re.fullmatch(r"TP-[0-9A-Z]+-[0-9A-Z]{4}", data["order_number"])
        assert data["subtotal"] == 60
        assert data["shipping_cost"] == 10
        assert data["tax"] == 6
        assert data["total_amount"] == 76
        assert data["payment_status"] == "paid"
        assert data["order_status"] == "processing"
        assert data["delivered_at"] is None
        assert data["items"][0]["name"] == "Test Headphones"
        assert data["items"][0]["line_total"] == 60
        assert data["shipping_address"]["city"] == "Lahore"
        assert session.get(Product, product.id).stock == 4

        cart = client.get("/api/v1/cart", headers=auth_headers(user)).json()["data"]
        assert cart["items"] == []

    def test_cash_on_delivery_is_pending(self, place, user, make_product, fill_cart):
        fill_cart(user, (make_product(), 1))

        response = place(user, payment_method="cod")

        assert response.json()["data"]["payment_status"] == "pending"

    def test_payment_result_round_trips(self, place, user, make_product, fill_cart):
        fill_cart(user, (make_product(), 1))
        payment_result = {"id": "PAY-9", "status": "COMPLETED", "update_time": "2026-10-19T09:00:00Z"}

        response = place(user, payment_method="paypal", payment_result=payment_result)

        assert response.json()["data"]["payment_result"] == payment_result

    def test_empty_cart(self, place, session, user):
        response = place(user)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "empty_cart",
            "message": "Cart is empty",
        }
        assert session.exec(select(Order)).all() == []

    def test_deleted_product(self, client, place, session, user, make_product, fill_cart, auth_headers):
        product = make_product()
        fill_cart(user, (product, 1))
        session.delete(product)
        session.commit()

        response = place(user)

        assert response.status_code == 409
        assert response.json()["error"] == "stock_update_failed"
        assert session.exec(select(Order)).all() == []
        cart = client.get("/api/v1/cart", headers=auth_headers(user)).json()["data"]
        assert len(cart["items"]) == 1

    def test_unknown_payment_method(self, place, user, make_product, fill_cart):
        fill_cart(user, (make_product(), 1))

        response = place(user, payment_method="bitcoin")

        assert response.status_code == 422

    def test_incomplete_address(self, place, user, make_product, fill_cart, shipping_address):
        fill_cart(user, (make_product(), 1))
        address = dict(shipping_address)
        del address["zip_code"]

        response = place(user, shipping_address=address)

        assert response.status_code == 422

    def test_blank_address_field(self, place, user, make_product, fill_cart, shipping_address):
        fill_cart(user, (make_product(), 1))

        response = place(user, shipping_address={**shipping_address, "country": ""})

        assert response.status_code == 422


class TestReadOrders:
    def test_list_my_orders(self, client, place, user, make_user, make_product, fill_cart, auth_headers):
        other = make_user(name="Other User")
        product = make_product(stock=10)
        fill_cart(user, (product, 1))
        fill_cart(other, (product, 1))
        mine = place(user).json()["data"]
        place(other)

        response = client.get("/api/v1/orders", headers=auth_headers(user))

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["id"] == mine["id"]

    def test_owner_reads_order(self, client, place, user, make_product, fill_cart, auth_headers):
        fill_cart(user, (make_product(), 1))
        order = place(user).json()["data"]

        response = client.get(f"/api/v1/orders/{order['id']}", headers=auth_headers(user))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["order_number"] == order["order_number"]
        assert data["user"] == {"id": user.id, "name": user.name, "email": user.email}

    def test_other_user_forbidden(self, client, place, user, make_user, make_product, fill_cart, auth_headers):
        intruder = make_user(name="Intruder")
        fill_cart(user, (make_product(), 1))
        order = place(user).json()["data"]

        response = client.get(f"/api/v1/orders/{order['id']}", headers=auth_headers(intruder))

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_admin_reads_any_order(self, client, place, user, admin, make_product, fill_cart, auth_headers):
        fill_cart(user, (make_product(), 1))
        order = place(user).json()["data"]

        response = client.get(f"/api/v1/orders/{order['id']}", headers=auth_headers(admin))

        assert response.status_code == 200

    def test_missing_order(self, client, user, auth_headers):
        response = client.get("/api/v1/orders/999", headers=auth_headers(user))

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestAdminOrders:
    def test_all_orders_with_revenue(
        self, client, place, user, make_user, admin, make_product, fill_cart, auth_headers
    ):
        other = make_user(name="Other User")
        fill_cart(user, (make_product(name="Cheap", price=60, stock=5), 1))
        fill_cart(other, (make_product(name="Pricey", price=150, stock=5), 1))
        place(user)
        place(other)

        response = client.get("/api/v1/orders/admin/all", headers=auth_headers(admin))

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert body["total_revenue"] == 241
        assert {o["user"]["name"] for o in body["data"]} == {"Test User", "Other User"}

    def test_all_orders_requires_admin(self, client, user, auth_headers):
        response = client.get("/api/v1/orders/admin/all", headers=auth_headers(user))

        assert response.status_code == 403
        assert response.json() == {
            "success": False,
            "error": "forbidden",
            "message": "Not authorized as admin",
        }

    def test_mark_delivered(self, client, place, user, admin, make_product, fill_cart, auth_headers):
        fill_cart(user, (make_product(), 1))
        order = place(user).json()["data"]

        response = client.put(
            f"/api/v1/orders/{order['id']}/status",
            json={"order_status": "delivered"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        delivered = response.json()["data"]
        assert delivered["order_status"] == "delivered"
        assert delivered["delivered_at"] is not None

        response = client.put(
            f"/api/v1/orders/{order['id']}/status",
            json={"order_status": "cancelled", "payment_status": "failed"},
            headers=auth_headers(admin),
        )

        data = response.json()["data"]
        assert data["order_status"] == "cancelled"
        assert data["payment_status"] == "failed"
        assert data["delivered_at"] == delivered["delivered_at"]

    def test_status_update_requires_admin(self, client, place, user, make_product, fill_cart, auth_headers):
        fill_cart(user, (make_product(), 1))
        order = place(user).json()["data"]

        response = client.put(
            f"/api/v1/orders/{order['id']}/status",
            json={"order_status": "shipped"},
            headers=auth_headers(user),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"
        assert response.json()["message"] == "Not authorized as admin"

    def test_invalid_status_value(self, client, place, user, admin, make_product, fill_cart, auth_headers):
        fill_cart(user, (make_product(), 1))
        order = place(user).json()["data"]

        response = client.put(
            f"/api/v1/orders/{order['id']}/status",
            json={"order_status": "lost"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 422

    def test_status_update_missing_order(self, client, admin, auth_headers):
        response = client.put(
            "/api/v1/orders/999/status",
            json={"order_status": "shipped"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 404


class TestCartApi:
    def test_get_creates_cart(self, client, user, auth_headers):
        response = client.get("/api/v1/cart", headers=auth_headers(user))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["items"] == []
        assert data["total_price"] == 0

    def test_add_update_remove_clear(self, client, user, make_product, auth_headers):
        headers = auth_headers(user)
        earbuds = make_product(name="Earbuds", price=25, stock=10)
        watch = make_product(name="Watch", price=40, stock=10)

        response = client.post(
            "/api/v1/cart/add",
            json={"product_id": earbuds.id, "quantity": 2, "color": "black"},
            headers=headers,
        )
        assert response.status_code == 200
        client.post("/api/v1/cart/add", json={"product_id": watch.id}, headers=headers)

        data = client.get("/api/v1/cart", headers=headers).json()["data"]
        assert data["total_items"] == 3
        assert data["total_price"] == 90
        earbuds_line = data["items"][0]["id"]
        watch_line = data["items"][1]["id"]

        response = client.put(
            f"/api/v1/cart/update/{earbuds_line}", json={"quantity": 4}, headers=headers
        )
        assert response.json()["data"]["total_price"] == 140

        response = client.delete(f"/api/v1/cart/remove/{watch_line}", headers=headers)
        assert [i["product_name"] for i in response.json()["data"]["items"]] == ["Earbuds"]

        response = client.delete("/api/v1/cart/clear", headers=headers)
        assert response.json()["data"]["items"] == []

    def test_add_insufficient_stock(self, client, user, make_product, auth_headers):
        product = make_product(stock=1)

        response = client.post(
            "/api/v1/cart/add",
            json={"product_id": product.id, "quantity": 2},
            headers=auth_headers(user),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Insufficient stock"

    def test_add_unknown_product(self, client, user, auth_headers):
        response = client.post(
            "/api/v1/cart/add", json={"product_id": 999}, headers=auth_headers(user)
        )

        assert response.status_code == 404

    def test_add_rejects_non_positive_quantity(self, client, user, make_product, auth_headers):
        product = make_product()

        response = client.post(
            "/api/v1/cart/add",
            json={"product_id": product.id, "quantity": 0},
            headers=auth_headers(user),
        )

        assert response.status_code == 422

    def test_clear_without_cart(self, client, user, auth_headers):
        response = client.delete("/api/v1/cart/clear", headers=auth_headers(user))

        assert response.status_code == 404
        assert response.json()["message"] == "Cart not found"

    def test_checkout_from_api_cart(self, client, place, user, make_product, auth_headers):
        headers = auth_headers(user)
        product = make_product(price=150, stock=2)
        client.post("/api/v1/cart/add", json={"product_id": product.id}, headers=headers)

        response = place(user)

        assert response.status_code == 201
        assert response.json()["data"]["total_amount"] == 165
        assert client.get("/api/v1/cart", headers=headers).json()["data"]["items"] == []
