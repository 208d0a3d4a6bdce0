import uuid

import pytest

from deltacare.services.order_service import delivery_fee_for

url_prefix = "/api/v1"

SHIPPING = {
    "full_name": "Asha Rao",
    "phone": "9876543210",
    "address": "12 MG Road",
    "city": "Bengaluru",
    "pincode": "560001",
    "payment_method": "upi",
}


def put_in_cart(fake, session, price, quantity=1, **medicine):
    [med] = fake.seed(
        "medicines",
        {"name": "Med", "price": price, "is_active": True, "requires_prescription": False, **medicine},
    )
    fake.seed(
        "cart_items",
        {"user_id": str(session.user_id), "medicine_id": med["id"], "quantity": quantity},
    )
    return med


@pytest.mark.parametrize("subtotal, fee", [(0, 40), (499.99, 40), (500, 0), (1200, 0)])
def test_delivery_fee(subtotal, fee):
    assert delivery_fee_for(subtotal) == fee


async def test_checkout_requires_login(ac_client):
    resp = await ac_client.post(f"{url_prefix}/orders/checkout", json=SHIPPING)
    assert resp.status_code == 401


async def test_empty_cart(ac_client, fake, login):
    login(role=None)
    resp = await ac_client.post(f"{url_prefix}/orders/checkout", json=SHIPPING)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cart is empty"


async def test_checkout_creates_order_and_clears_cart(ac_client, fake, login):
    session = login(role=None)
    put_in_cart(fake, session, price=120, quantity=2)

    resp = await ac_client.post(f"{url_prefix}/orders/checkout", json=SHIPPING)

    assert resp.status_code == 201, resp.text
    order = resp.json()["order"]
    assert order["subtotal"] == 240
    assert order["delivery_fee"] == 40
    assert order["total_amount"] == 280
    assert order["status"] == "pending"
    assert order["items"][0]["quantity"] == 2
    assert fake.rows("cart_items") == []

    cart = await ac_client.get(f"{url_prefix}/cart")
    assert cart.json()["item_count"] == 0


async def test_free_delivery_from_500(ac_client, fake, login):
    session = login(role=None)
    put_in_cart(fake, session, price=250, quantity=2)

    resp = await ac_client.post(f"{url_prefix}/orders/checkout", json=SHIPPING)

    assert resp.status_code == 201, resp.text
    assert resp.json()["order"]["delivery_fee"] == 0
    assert resp.json()["order"]["total_amount"] == 500


async def test_prescription_lines_need_prescription(ac_client, fake, login):
    session = login(role=None)
    put_in_cart(fake, session, price=90, requires_prescription=True)

    resp = await ac_client.post(f"{url_prefix}/orders/checkout", json=SHIPPING)
    assert resp.status_code == 400
    assert fake.rows("orders") == []

    resp = await ac_client.post(
        f"{url_prefix}/orders/checkout",
        json={**SHIPPING, "prescription_id": str(uuid.uuid4())},
    )
    assert resp.status_code == 201, resp.text


async def test_list_my_orders_newest_first(ac_client, fake, login):
    session = login(role=None)
    base = {
        "user_id": str(session.user_id),
        **{k: v for k, v in SHIPPING.items()},
        "items": [],
        "subtotal": 0,
        "delivery_fee": 40,
        "total_amount": 40,
        "status": "pending",
    }
    fake.seed(
        "orders",
        {**base, "created_at": "2025-01-01T10:00:00+00:00"},
        {**base, "created_at": "2025-03-01T10:00:00+00:00"},
        {**base, "user_id": str(uuid.uuid4()), "created_at": "2025-02-01T10:00:00+00:00"},
    )

    resp = await ac_client.get(f"{url_prefix}/orders/me")

    assert resp.status_code == 200, resp.text
    dates = [o["created_at"][:10] for o in resp.json()]
    assert dates == ["2025-03-01", "2025-01-01"]


async def test_checkout_retry_returns_placed_order(ac_client, fake, login):
    session = login(role=None)
    put_in_cart(fake, session, price=120)
    payload = {**SHIPPING, "request_id": str(uuid.uuid4())}

    first = await ac_client.post(f"{url_prefix}/orders/checkout", json=payload)
    assert first.status_code == 201, first.text
    assert fake.rows("cart_items") == []

    retry = await ac_client.post(f"{url_prefix}/orders/checkout", json=payload)

    assert retry.status_code == 201, retry.text
    assert retry.json()["order"]["id"] == first.json()["order"]["id"]
    assert retry.json()["message"] == "Order placed successfully!"
    assert len(fake.rows("orders")) == 1
