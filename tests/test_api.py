"""Testy HTTP - routery na TestClient, baza SQLite w pamieci."""
from datetime import datetime, timedelta, timezone

from app.services.cart_service import CartService
from tests.conftest import SHIPPING


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_user_upsert_and_get(client, db):
    payload = {"id": 7, "name": "Maria", "email": "maria@example.com", "phone": "244911111111"}
    assert client.post("/users/", json=payload).status_code == 200

    payload["name"] = "Maria Lopes"
    client.post("/users/", json=payload)

    response = client.get("/users/7")
    assert response.status_code == 200
    assert response.json()["name"] == "Maria Lopes"
    assert client.get("/users/8").status_code == 404


def test_offer_list_and_detail(client, make_offer):
    offer = make_offer(product_ids=(1, 2), discount=15)

    offers = client.get("/offers/").json()
    assert [o["id"] for o in offers] == [offer.id]
    assert offers[0]["product_ids"] == [1, 2]

    detail = client.get(f"/offers/{offer.id}").json()
    assert detail["claimed_by"] == []
    assert client.get("/offers/999").status_code == 404


def test_claim_endpoint_outcomes(client, make_offer):
    offer = make_offer(product_ids=(1,), discount=20)

    first = client.post("/offers/claim", params={"user_id": 1}, json={"offer_id": offer.id})
    assert first.status_code == 200
    body = first.json()
    assert body["outcome"] == "claimed"
    assert body["added_products"][0]["price"] == 800
    assert body["order"] is None

    second = client.post("/offers/claim", params={"user_id": 1}, json={"offer_id": offer.id})
    assert second.status_code == 200
    assert second.json()["outcome"] == "already_claimed"

    claimed_by = client.get(f"/offers/{offer.id}").json()["claimed_by"]
    assert [c["user_id"] for c in claimed_by] == [1]


def test_claim_expired_offer_is_bad_request(client, make_offer):
    now = datetime.now(timezone.utc)
    offer = make_offer(valid_from=now - timedelta(days=3), valid_until=now - timedelta(days=1))

    response = client.post("/offers/claim", params={"user_id": 1}, json={"offer_id": offer.id})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "offer_invalid"


def test_claim_with_order_returns_link(client, make_offer):
    offer = make_offer(product_ids=(1,), discount=20)

    response = client.post(
        "/offers/claim",
        params={"user_id": 1},
        json={"offer_id": offer.id, "create_order": True, "shipping_address": SHIPPING},
    )

    body = response.json()
    assert body["outcome"] == "claimed"
    assert body["order"]["total_amount"] == 800
    assert body["order"]["status"] == "pending"
    assert body["whatsapp_link"].startswith("https://wa.me/244922706107?text=")
    assert "800 Kz" in body["whatsapp_message"]


def test_claim_with_order_without_address_is_unprocessable(client, make_offer):
    offer = make_offer()

    response = client.post(
        "/offers/claim",
        params={"user_id": 1},
        json={"offer_id": offer.id, "create_order": True},
    )

    assert response.status_code == 422


def test_cart_endpoints(client, products):
    response = client.post("/cart/items", params={"user_id": 1}, json={"product_id": 1, "quantity": 2})
    assert response.status_code == 200
    assert response.json()["total_price"] == 2000

    response = client.put("/cart/items/1", params={"user_id": 1}, json={"quantity": 1})
    assert response.json()["items"][0]["quantity"] == 1

    response = client.put("/cart/items/1", params={"user_id": 1}, json={"quantity": 0})
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_quantity"

    summary = client.get("/cart/summary", params={"user_id": 1}).json()
    assert summary["item_count"] == 1

    response = client.delete("/cart/items/1", params={"user_id": 1})
    assert response.json()["items"] == []

    client.post("/cart/items", params={"user_id": 1}, json={"product_id": 2})
    response = client.delete("/cart/", params={"user_id": 1})
    assert response.json()["items"] == []


def test_add_inactive_product_is_rejected(client, products):
    response = client.post("/cart/items", params={"user_id": 1}, json={"product_id": 3})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "product_unavailable"


def test_checkout_endpoint(client, products):
    client.post("/cart/items", params={"user_id": 1}, json={"product_id": 1, "quantity": 2})

    response = client.post("/cart/checkout", params={"user_id": 1}, json={"shipping_address": SHIPPING})

    assert response.status_code == 201
    body = response.json()
    assert body["order"]["total_amount"] == 2000
    assert body["order"]["source"] == "cart"
    assert body["stock_warnings"] == []
    assert client.get("/cart/", params={"user_id": 1}).json()["items"] == []


def test_checkout_empty_cart(client, products):
    response = client.post("/cart/checkout", params={"user_id": 1}, json={"shipping_address": SHIPPING})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "empty_cart"


def test_checkout_insufficient_stock_names_product(client, db, products):
    CartService(db).merge_line(1, 2, 5, 500)

    response = client.post("/cart/checkout", params={"user_id": 1}, json={"shipping_address": SHIPPING})

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["code"] == "insufficient_stock"
    assert detail["product_name"] == "Mouse"
    assert len(client.get("/cart/", params={"user_id": 1}).json()["items"]) == 1


def test_order_endpoints(client, products):
    client.post("/cart/items", params={"user_id": 1}, json={"product_id": 1})
    order = client.post(
        "/cart/checkout", params={"user_id": 1}, json={"shipping_address": SHIPPING}
    ).json()["order"]

    assert client.get(f"/orders/{order['id']}", params={"user_id": 1}).status_code == 200
    assert client.get(f"/orders/{order['id']}", params={"user_id": 2}).status_code == 403

    listing = client.get("/orders/", params={"user_id": 1}).json()
    assert listing["pagination"]["total_orders"] == 1

    response = client.put(f"/orders/{order['id']}/status", json={"status": "shipped"})
    assert response.status_code == 409

    response = client.put(f"/orders/{order['id']}/status", json={"status": "confirmed"})
    assert response.json()["status"] == "confirmed"

    response = client.put(f"/orders/{order['id']}/whatsapp-sent")
    assert response.json()["whatsapp_sent"] is True

    resent = client.post(f"/orders/{order['id']}/resend-whatsapp").json()
    assert resent["whatsapp_message"] == order["whatsapp_message"]

    response = client.put(
        f"/orders/{order['id']}/cancel", params={"user_id": 1}, json={"reason": "Ordered by mistake"}
    )
    assert response.json()["status"] == "cancelled"

    stats = client.get("/orders/stats").json()
    assert stats["status_breakdown"]["cancelled"] == 1
    assert stats["total_revenue"] == 0
