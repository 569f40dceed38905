"""End-to-end: order, payment request, gateway webhook, kitchen queue."""

from shared.db import provider_names
from shared.domain import quickbite


def _place_paid_order(api, product_id, quantity=1):
    order = api.post("/order", json={"items": [{"product_id": product_id, "quantity": quantity}]}).json()
    payment = api.post("/payment", json={"order_id": order["id"]}).json()
    api.post(f"/payment/gateway/charges/{payment['external_reference']}/settle", json={"status": "paid"})
    api.post(f"/payment/webhook?topic=merchant_order&id={payment['external_reference']}")
    return order, payment


class TestOrderPaymentFlow:
    def test_burger_order_from_menu_to_kitchen(self, api):
        product_id = api.post(
            "/product", json={"name": "X-Burger", "category": "Snack", "unit_price": "14.95"}
        ).json()["product_id"]

        order = api.post("/order", json={"items": [{"product_id": product_id, "quantity": 2}]}).json()
        assert order["value"] == "29.90"
        assert order["status"] == "AWAITING_PAYMENT"

        payment = api.post("/payment", json={"order_id": order["id"]}).json()
        assert payment["amount"] == "29.90"
        assert payment["status"] == "AWAITING"

        api.post(f"/payment/gateway/charges/{payment['external_reference']}/settle", json={"status": "paid"})
        webhook = f"/payment/webhook?topic=merchant_order&id={payment['external_reference']}"
        assert api.post(webhook).json()["outcome"] == "APPLIED"

        assert api.get(f"/order/{order['id']}").json()["status"] == "RECEIVED"
        assert api.get(f"/payment/{payment['payment_id']}").json()["status"] == "PAID"

        # Redelivery changes nothing
        assert api.post(webhook).json()["outcome"] == "DUPLICATE"
        assert api.get(f"/order/{order['id']}").json()["status"] == "RECEIVED"

        active = api.get("/order/status/active").json()
        assert [item["id"] for item in active] == [order["id"]]

        for status in ("IN_PREPARATION", "READY", "COMPLETED"):
            assert api.patch(f"/order/{order['id']}/status", json={"status": status}).status_code == 200
        assert api.get("/order/status/active").json() == []

    def test_kitchen_queue_is_fifo(self, api):
        product_id = api.post(
            "/product", json={"name": "Fries", "category": "Side", "unit_price": "7.00"}
        ).json()["product_id"]

        first, _ = _place_paid_order(api, product_id)
        second, _ = _place_paid_order(api, product_id)
        third, _ = _place_paid_order(api, product_id)
        api.patch(f"/order/{first['id']}/status", json={"status": "IN_PREPARATION"})

        active = api.get("/order/status/active").json()
        assert [item["id"] for item in active] == [first["id"], second["id"], third["id"]]


def test_health(api):
    body = api.get("/health").json()
    assert body["status"] == "ok"
    assert body["database"] == provider_names(quickbite)
    assert body["gateway"] == "fake"
