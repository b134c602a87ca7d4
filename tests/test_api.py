"""HTTP layer: routing, error translation and the admin key."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.data.models import ContactMessageModel, OrderModel
from app.main import app as fastapi_app
from conftest import make_user, make_variant, put_in_cart, sign, stock_of


def add_to_cart(client, user_id, variant, quantity=1):
    return client.post(
        "/cart/items",
        params={"user_id": user_id},
        json={"product_id": variant.product_id, "variant_id": variant.id, "quantity": quantity},
    )


def paid(client, user_id, confirmation="pay_1"):
    """Open a payment intent for the current cart and sign its confirmation."""
    intent_id = client.post("/orders/payment-intent", params={"user_id": user_id}).json()["intent_id"]
    return {"intent_id": intent_id, "confirmation_id": confirmation, "signature": sign(intent_id, confirmation)}


def checkout(client, user_id, confirmation="pay_1"):
    return client.post("/orders/verify-payment", params={"user_id": user_id}, json=paid(client, user_id, confirmation))


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestUsers:
    def test_register_and_fetch(self, client):
        resp = client.post(
            "/users/",
            json={
                "name": "Asha",
                "email": "Asha@Example.com",
                "phone_number": "9876543210",
                "address": {"street": "1 Lake Road", "city": "Pune", "postal_code": "411001"},
            },
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["email"] == "asha@example.com"

        fetched = client.get(f"/users/{body['id']}").json()
        assert fetched["address"]["city"] == "Pune"

    def test_duplicate_email_conflict(self, client):
        payload = {"name": "Asha", "email": "asha@example.com"}
        client.post("/users/", json=payload)

        resp = client.post("/users/", json=payload)

        assert resp.status_code == 409
        assert resp.json() == {"message": "User already exists with this email"}

    def test_bad_phone_number(self, client):
        resp = client.post("/users/", json={"name": "Asha", "email": "asha@example.com", "phone_number": "12"})
        assert resp.status_code == 400
        assert "phone_number" in resp.json()["message"]

    def test_unknown_user(self, client):
        resp = client.get("/users/404")
        assert resp.status_code == 404
        assert resp.json() == {"message": "User not found"}

    def test_update_address(self, client, db):
        user = make_user(db, with_address=False)
        resp = client.patch(
            f"/users/{user.id}/address",
            json={"street": "9 Park Street", "city": "Kolkata", "postal_code": "700016"},
        )
        assert resp.status_code == 200
        assert resp.json()["address"]["postal_code"] == "700016"


class TestCartEndpoints:
    def test_get_creates_empty_cart(self, client, db):
        user = make_user(db)
        resp = client.get("/cart/", params={"user_id": user.id})
        assert resp.status_code == 200
        assert resp.json()["items"] == []

    def test_add_update_remove(self, client, db):
        user = make_user(db)
        variant = make_variant(db, price="100.00")

        resp = add_to_cart(client, user.id, variant, 2)
        assert resp.status_code == 200
        assert Decimal(resp.json()["total"]) == Decimal("200.00")

        resp = client.patch(
            "/cart/items",
            params={"user_id": user.id},
            json={"product_id": variant.product_id, "variant_id": variant.id, "quantity": 4},
        )
        assert resp.json()["items"][0]["quantity"] == 4

        resp = client.delete(f"/cart/items/{variant.product_id}/{variant.id}", params={"user_id": user.id})
        assert resp.status_code == 200
        assert resp.json()["items"] == []

    def test_add_zero_quantity(self, client, db):
        user = make_user(db)
        resp = add_to_cart(client, user.id, make_variant(db), 0)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Quantity must be >= 1"}

    def test_add_unknown_variant(self, client, db):
        user = make_user(db)
        resp = client.post(
            "/cart/items",
            params={"user_id": user.id},
            json={"product_id": 1, "variant_id": 99, "quantity": 1},
        )
        assert resp.status_code == 404
        assert resp.json() == {"message": "Product or Variant not found"}

    def test_update_item_not_in_cart(self, client, db):
        user = make_user(db)
        variant = make_variant(db)
        resp = client.patch(
            "/cart/items",
            params={"user_id": user.id},
            json={"product_id": variant.product_id, "variant_id": variant.id, "quantity": 1},
        )
        assert resp.status_code == 404

    def test_missing_user_id(self, client):
        resp = client.get("/cart/")
        assert resp.status_code == 400
        assert "message" in resp.json()


class TestCheckoutEndpoints:
    def test_payment_intent(self, client, db, gateway):
        user = make_user(db)
        put_in_cart(db, user, make_variant(db, price="100.00"), 2)

        resp = client.post("/orders/payment-intent", params={"user_id": user.id})

        assert resp.status_code == 201
        body = resp.json()
        assert body["intent_id"] == "order_test_1"
        assert body["amount_minor"] == 24900

    def test_payment_intent_empty_cart(self, client, db):
        user = make_user(db)
        resp = client.post("/orders/payment-intent", params={"user_id": user.id})
        assert resp.status_code == 400
        assert resp.json() == {"message": "Cart is empty"}

    def test_verify_then_retry(self, client, db, notifier):
        user = make_user(db)
        variant = make_variant(db, price="100.00", stock=5)
        put_in_cart(db, user, variant, 2)
        payload = paid(client, user.id)

        first = client.post("/orders/verify-payment", params={"user_id": user.id}, json=payload)
        second = client.post("/orders/verify-payment", params={"user_id": user.id}, json=payload)

        assert first.status_code == 201
        assert first.json()["message"] == "Order booked successfully"
        assert second.status_code == 200
        assert second.json()["order_id"] == first.json()["order_id"]
        assert stock_of(db, variant.id) == 3

        order = client.get(f"/orders/{first.json()['order_id']}", params={"user_id": user.id}).json()
        assert Decimal(order["pricing"]["final_amount"]) == Decimal("249.00")
        assert order["current_status"] == "BOOKED"
        assert order["delivery_address"]["city"] == "Pune"

    def test_verify_bad_signature(self, client, db):
        user = make_user(db)
        put_in_cart(db, user, make_variant(db), 1)

        resp = client.post(
            "/orders/verify-payment",
            params={"user_id": user.id},
            json={"intent_id": "order_1", "confirmation_id": "pay_1", "signature": "nope"},
        )

        assert resp.status_code == 400
        assert resp.json() == {"message": "Payment verification failed"}
        db.expire_all()
        assert db.query(OrderModel).count() == 0

    def test_verify_after_cart_grew(self, client, db):
        user = make_user(db)
        put_in_cart(db, user, make_variant(db, name="Pillow", price="100.00"), 1)
        payload = paid(client, user.id)
        add_to_cart(client, user.id, make_variant(db, name="Quilt", price="5000.00"))

        resp = client.post("/orders/verify-payment", params={"user_id": user.id}, json=payload)

        assert resp.status_code == 400
        assert resp.json() == {"message": "Cart changed after payment was initiated"}
        db.expire_all()
        assert db.query(OrderModel).count() == 0

    def test_verify_unknown_intent(self, client, db):
        user = make_user(db)
        put_in_cart(db, user, make_variant(db), 1)

        resp = client.post(
            "/orders/verify-payment",
            params={"user_id": user.id},
            json={"intent_id": "order_x", "confirmation_id": "pay_1", "signature": sign("order_x", "pay_1")},
        )

        assert resp.status_code == 400
        assert resp.json() == {"message": "Payment verification failed"}

    def test_verify_out_of_stock(self, client, db):
        user = make_user(db)
        put_in_cart(db, user, make_variant(db, name="Towel", stock=1), 2)

        resp = checkout(client, user.id)

        assert resp.status_code == 409
        assert resp.json() == {"message": "Insufficient stock for Towel"}

    def test_my_orders(self, client, db):
        user = make_user(db)
        put_in_cart(db, user, make_variant(db), 1)
        checkout(client, user.id)

        orders = client.get("/orders/my-orders", params={"user_id": user.id}).json()

        assert len(orders) == 1
        assert orders[0]["events"][0]["type"] == "ORDER_BOOKED"

    def test_foreign_order_forbidden(self, client, db):
        owner = make_user(db, email="owner@example.com")
        other = make_user(db, email="other@example.com")
        put_in_cart(db, owner, make_variant(db), 1)
        order_id = checkout(client, owner.id).json()["order_id"]

        resp = client.get(f"/orders/{order_id}", params={"user_id": other.id})

        assert resp.status_code == 403


class TestAdminEndpoints:
    def _booked_order(self, client, db):
        user = make_user(db)
        put_in_cart(db, user, make_variant(db), 1)
        return checkout(client, user.id).json()["order_id"]

    def test_admin_key_required(self, client):
        resp = client.get("/admin/orders/")
        assert resp.status_code == 401
        assert resp.json() == {"message": "Admin credentials required"}

    def test_wrong_admin_key(self, client):
        resp = client.get("/admin/orders/", headers={"X-Admin-Key": "guess"})
        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid admin credentials"}

    def test_admin_disabled_without_configured_key(self, client, admin_headers):
        fastapi_app.dependency_overrides[deps.get_admin_key] = lambda: ""
        resp = client.get("/admin/orders/", headers=admin_headers)
        assert resp.status_code == 401

    def test_update_status(self, client, db, admin_headers):
        order_id = self._booked_order(client, db)

        resp = client.patch(
            f"/admin/orders/{order_id}/status",
            headers=admin_headers,
            json={"status": "SHIPPED"},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["current_status"] == "SHIPPED"
        assert [e["actor"] for e in body["events"]] == ["SYSTEM", "ADMIN"]

    def test_invalid_status(self, client, db, admin_headers):
        order_id = self._booked_order(client, db)

        resp = client.patch(
            f"/admin/orders/{order_id}/status",
            headers=admin_headers,
            json={"status": "LOST"},
        )

        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid order status"}

    def test_status_of_unknown_order(self, client, admin_headers):
        resp = client.patch("/admin/orders/77/status", headers=admin_headers, json={"status": "PACKED"})
        assert resp.status_code == 404

    def test_stale_version_conflict(self, client, db, admin_headers):
        order_id = self._booked_order(client, db)
        client.patch(f"/admin/orders/{order_id}/status", headers=admin_headers, json={"status": "CONFIRMED"})

        resp = client.patch(
            f"/admin/orders/{order_id}/status",
            headers=admin_headers,
            json={"status": "PACKED", "expected_version": 1},
        )

        assert resp.status_code == 409

    def test_list_and_delete(self, client, db, admin_headers):
        order_id = self._booked_order(client, db)

        assert len(client.get("/admin/orders/", headers=admin_headers).json()) == 1
        resp = client.delete(f"/admin/orders/{order_id}", headers=admin_headers)
        assert resp.status_code == 200
        assert client.get("/admin/orders/", headers=admin_headers).json() == []
        assert client.delete(f"/admin/orders/{order_id}", headers=admin_headers).status_code == 404


class TestContact:
    def test_contact_us(self, client, db):
        resp = client.post(
            "/orders/contact",
            json={
                "name": "Ravi",
                "email": "ravi@example.com",
                "mobile": "9876543210",
                "category": "Delivery",
                "description": "Where is my parcel?",
                "pincode": "411001",
            },
        )
        assert resp.status_code == 201
        db.expire_all()
        assert db.query(ContactMessageModel).one().type == "contactUs"

    def test_bulk_order_maps_fields(self, client, db):
        resp = client.post(
            "/orders/bulk-order",
            json={
                "name": "Ravi",
                "email": "ravi@example.com",
                "mobile": "9876543210",
                "organisation": "Hotel Sunrise",
                "requirements": "200 towels",
                "pincode": "411001",
            },
        )
        assert resp.status_code == 201
        db.expire_all()
        msg = db.query(ContactMessageModel).one()
        assert (msg.type, msg.category, msg.description) == ("bulkOrder", "Hotel Sunrise", "200 towels")

    def test_missing_field(self, client):
        resp = client.post("/orders/contact", json={"name": "Ravi"})
        assert resp.status_code == 400


class TestUnexpectedErrors:
    def test_internal_error_is_not_leaked(self, lock_service, gateway, notifier):
        class Broken:
            def get_cart(self, user_id):
                raise RuntimeError("connection string postgres://secret@db")

        fastapi_app.dependency_overrides[deps.get_cart_service] = lambda: Broken()
        try:
            client = TestClient(fastapi_app, raise_server_exceptions=False)
            resp = client.get("/cart/", params={"user_id": 1})
        finally:
            fastapi_app.dependency_overrides.clear()

        assert resp.status_code == 500
        assert resp.json() == {"message": "Internal server error"}
