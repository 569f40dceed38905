"""Tests for the Mercado Pago adapter against a mocked HTTP session."""

from unittest.mock import MagicMock

import pytest
import requests

from ordering.order.order import Order, OrderLineItem
from payments.gateway.errors import GatewayAuthError, GatewayRequestError
from payments.gateway.mercadopago_adapter import MercadoPagoGateway
from payments.gateway.port import Credential
from shared.config import MercadoPagoSettings

BASE_URL = "https://mp.test"
QR_URL = f"{BASE_URL}/instore/orders/qr/seller/collectors/4242/pos/Loja1/qrs"


def _response(json=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json if json is not None else {}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


def _token_response(**overrides):
    body = {"access_token": "APP-TOKEN", "token_type": "Bearer", "user_id": 4242}
    body.update(overrides)
    return _response(body)


@pytest.fixture()
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture()
def mp_gateway(session):
    settings = MercadoPagoSettings(
        base_url=BASE_URL,
        client_id="client",
        client_secret="secret",
        notification_url="https://quickbite.test/payment/webhook",
    )
    return MercadoPagoGateway(settings, timeout=3, session=session)


def _make_order():
    item = OrderLineItem(
        product_id="p1", name="X-Burger", category="Snack", quantity=2, unit_price="14.95"
    )
    return Order.create(items=[item], order_id="abc123")


class TestAuthenticate:
    def test_exchanges_client_credentials(self, mp_gateway, session):
        session.post.return_value = _token_response()

        credential = mp_gateway.authenticate()

        assert credential == Credential(token="Bearer APP-TOKEN", user_id="4242")
        args, kwargs = session.post.call_args
        assert args[0] == f"{BASE_URL}/oauth/token"
        assert kwargs["json"] == {
            "client_id": "client",
            "client_secret": "secret",
            "grant_type": "client_credentials",
        }
        assert kwargs["timeout"] == 3

    def test_rejected_credentials(self, mp_gateway, session):
        session.post.return_value = _response({"message": "invalid"}, status_code=401)
        with pytest.raises(GatewayAuthError):
            mp_gateway.authenticate()

    def test_token_missing_from_response(self, mp_gateway, session):
        session.post.return_value = _token_response(access_token=None)
        with pytest.raises(GatewayAuthError):
            mp_gateway.authenticate()

    def test_timeout_is_retriable(self, mp_gateway, session):
        session.post.side_effect = requests.exceptions.ConnectTimeout()
        with pytest.raises(GatewayRequestError):
            mp_gateway.authenticate()


class TestCreateCharge:
    def test_creates_qr_order(self, mp_gateway, session):
        session.post.return_value = _response(
            {"in_store_order_id": "mp-order-1", "qr_data": "00020101021243650016COM.MERCADOLIBRE"}
        )
        credential = Credential(token="Bearer APP-TOKEN", user_id="4242")

        charge = mp_gateway.create_charge(credential, _make_order())

        assert charge.external_reference == "mp-order-1"
        assert charge.qr_payload.startswith("000201")
        args, kwargs = session.post.call_args
        assert args[0] == QR_URL
        sent = kwargs["json"]
        assert sent["external_reference"] == "abc123"
        assert sent["total_amount"] == 29.9
        assert sent["items"][0]["unit_price"] == 14.95
        assert sent["items"][0]["quantity"] == 2
        assert sent["notification_url"] == "https://quickbite.test/payment/webhook"
        assert kwargs["headers"]["Authorization"] == "Bearer APP-TOKEN"

    def test_server_error_is_retriable(self, mp_gateway, session):
        session.post.return_value = _response(status_code=500)
        with pytest.raises(GatewayRequestError) as exc:
            mp_gateway.create_charge(Credential(token="Bearer T", user_id="4242"), _make_order())
        assert exc.value.retriable is True

    def test_timeout(self, mp_gateway, session):
        session.post.side_effect = requests.exceptions.ReadTimeout()
        with pytest.raises(GatewayRequestError):
            mp_gateway.create_charge(Credential(token="Bearer T", user_id="4242"), _make_order())

    def test_missing_qr_data(self, mp_gateway, session):
        session.post.return_value = _response({"in_store_order_id": "mp-order-1"})
        with pytest.raises(GatewayRequestError):
            mp_gateway.create_charge(Credential(token="Bearer T", user_id="4242"), _make_order())


class TestChargeStatus:
    def test_reads_merchant_order(self, mp_gateway, session):
        session.post.return_value = _token_response()
        session.get.return_value = _response(
            {"id": 987, "status": "closed", "order_status": "paid", "external_reference": "abc123"}
        )

        status = mp_gateway.get_charge_status("https://api.mercadolibre.com/merchant_orders/987")

        assert session.get.call_args.args[0] == f"{BASE_URL}/merchant_orders/987"
        assert session.get.call_args.kwargs["headers"] == {"Authorization": "Bearer APP-TOKEN"}
        assert status.charge_id == "987"
        assert status.status == "paid"
        assert status.order_reference == "abc123"
        assert mp_gateway.map_status(status.status).value == "PAID"

    def test_falls_back_to_status(self, mp_gateway, session):
        session.post.return_value = _token_response()
        session.get.return_value = _response({"id": 987, "status": "expired"})
        assert mp_gateway.get_charge_status("987").status == "expired"

    def test_lookup_failure(self, mp_gateway, session):
        session.post.return_value = _token_response()
        session.get.return_value = _response(status_code=404)
        with pytest.raises(GatewayRequestError):
            mp_gateway.get_charge_status("987")
