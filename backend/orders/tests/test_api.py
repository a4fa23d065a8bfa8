from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from core.models import Product
from orders.models import Invoice, Order, OrderStatus

pytestmark = pytest.mark.django_db


SHIPPING = {
    "name": "Ravi Kumar",
    "email": "ravi@example.com",
    "phone": "9812345678",
    "address": "4 Sector 15",
    "city": "Faridabad",
    "state": "Haryana",
    "pincode": "121007",
}


def _mk_product(stock=5):
    return Product.objects.create(name="Tea", slug="tea", price=Decimal("100"), stock=stock, weight=Decimal("100"))


def _mk_user_and_client(email="ravi@example.com", is_staff=False, username="ravi"):
    User = get_user_model()
    user = User.objects.create_user(username=username, email=email, password="pass", is_staff=is_staff)
    client = APIClient()
    client.force_authenticate(user=user)
    return user, client


def _checkout(client, product, qty=1, method="cod"):
    return client.post(
        "/api/orders",
        {"items": [{"product_id": str(product.pk), "quantity": qty}], "shipping": SHIPPING, "payment_method": method},
        format="json",
    )


def test_guest_checkout_returns_receipt():
    p = _mk_product()
    r = _checkout(APIClient(), p)
    assert r.status_code == 201, r.content
    body = r.json()
    assert Decimal(str(body["totalAmount"])) == Decimal("186")
    assert Decimal(str(body["shippingCost"])) == Decimal("50")
    assert Order.objects.get(pk=body["orderId"]).guest_email == "ravi@example.com"


def test_checkout_validation_error_is_400():
    p = _mk_product()
    client = APIClient()
    r = client.post(
        "/api/orders",
        {"items": [{"product_id": str(p.pk), "quantity": 1}], "shipping": dict(SHIPPING, pincode="12"), "payment_method": "cod"},
        format="json",
    )
    assert r.status_code == 400
    assert "pincode" in r.json()["errors"]["shipping"]


def test_checkout_list_body_is_400():
    p = _mk_product()
    r = APIClient().post("/api/orders", [{"product_id": str(p.pk), "quantity": 1}], format="json")
    assert r.status_code == 400
    assert r.json()["errors"]["non_field_errors"] == ["Expected a JSON object"]
    assert not Order.objects.exists()


def test_checkout_unknown_product_is_404():
    r = APIClient().post(
        "/api/orders",
        {"items": [{"product_id": "555", "quantity": 1}], "shipping": SHIPPING, "payment_method": "cod"},
        format="json",
    )
    assert r.status_code == 404


def test_checkout_insufficient_stock_is_409():
    p = _mk_product(stock=1)
    r = _checkout(APIClient(), p, qty=3)
    assert r.status_code == 409
    body = r.json()
    assert body["requested"] == 3
    assert body["available"] == 1
    assert Order.objects.count() == 0


def test_order_list_requires_login():
    assert APIClient().get("/api/orders").status_code == 401


def test_owner_sees_order_delivery_and_invoice():
    p = _mk_product()
    _, client = _mk_user_and_client()
    order_id = _checkout(client, p).json()["orderId"]

    listing = client.get("/api/orders").json()["orders"]
    assert [o["id"] for o in listing] == [order_id]

    assert client.get(f"/api/orders/{order_id}").status_code == 200
    delivery = client.get(f"/api/orders/{order_id}/delivery")
    assert delivery.status_code == 200
    assert delivery.json()["status"] == "pending"
    invoice = client.get(f"/api/invoices/{order_id}")
    assert invoice.status_code == 200
    assert invoice.json()["invoice_number"].startswith("INV-")


def test_other_customer_is_forbidden():
    p = _mk_product()
    _, owner = _mk_user_and_client()
    order_id = _checkout(owner, p).json()["orderId"]
    _, stranger = _mk_user_and_client(email="x@example.com", username="x")
    assert stranger.get(f"/api/orders/{order_id}").status_code == 403
    assert stranger.get(f"/api/invoices/{order_id}").status_code == 403


def test_invoice_missing_for_unpaid_order():
    p = _mk_product()
    _, client = _mk_user_and_client()
    order_id = _checkout(client, p, method="razorpay").json()["orderId"]
    assert client.get(f"/api/invoices/{order_id}").status_code == 404


def test_staff_confirms_payment():
    p = _mk_product()
    order_id = _checkout(APIClient(), p, method="razorpay").json()["orderId"]

    _, customer = _mk_user_and_client(username="c", email="c@example.com")
    assert customer.post(f"/api/orders/{order_id}/confirm-payment").status_code == 403

    _, staff = _mk_user_and_client(username="ops", email="ops@example.com", is_staff=True)
    r = staff.post(f"/api/orders/{order_id}/confirm-payment")
    assert r.status_code == 200
    assert Invoice.objects.filter(order_id=order_id).count() == 1
    assert Order.objects.get(pk=order_id).order_status == OrderStatus.CONFIRMED
