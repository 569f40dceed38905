"""Mercado Pago gateway adapter (in-store QR orders).

Flow:
- ``POST /oauth/token`` exchanges client credentials for an access token and
  the collector's user id.
- ``POST /instore/orders/qr/seller/collectors/{user_id}/pos/{pos}/qrs``
  creates a QR order for the order's value; the response carries the QR
  payload and the in-store order id.
- Notifications arrive with topic ``merchant_order`` and a resource URL; the
  merchant order behind it holds the authoritative ``order_status`` and echoes
  our order id as ``external_reference``.

Every call carries a timeout. A timeout or transport failure while charging or
looking up status is a retriable ``GatewayRequestError``.
"""

import requests
import structlog

from payments.gateway.errors import GatewayAuthError, GatewayRequestError
from payments.gateway.port import Charge, ChargeStatus, Credential, PaymentGateway
from payments.payment.payment import PaymentStatus
from shared.config import MercadoPagoSettings

logger = structlog.get_logger(__name__)


class MercadoPagoGateway(PaymentGateway):
    name = "mercadopago"
    status_map = {
        "paid": PaymentStatus.PAID,
        "payment_required": PaymentStatus.AWAITING,
        "payment_in_process": PaymentStatus.AWAITING,
        "partially_paid": PaymentStatus.AWAITING,
        "opened": PaymentStatus.AWAITING,
        "reverted": PaymentStatus.FAILED,
        "rejected": PaymentStatus.FAILED,
        "canceled": PaymentStatus.FAILED,
        "cancelled": PaymentStatus.FAILED,
        "expired": PaymentStatus.EXPIRED,
    }

    def __init__(
        self,
        settings: MercadoPagoSettings,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}/{path.lstrip('/')}"

    def authenticate(self) -> Credential:
        try:
            response = self.session.post(
                self._url("/oauth/token"),
                json={
                    "client_id": self.settings.client_id,
                    "client_secret": self.settings.client_secret,
                    "grant_type": "client_credentials",
                },
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as exc:
            raise GatewayRequestError({"gateway": ["Token request timed out"]}) from exc
        except (requests.RequestException, ValueError) as exc:
            raise GatewayAuthError({"gateway": [f"Failed to fetch Mercado Pago token: {exc}"]}) from exc

        token = data.get("access_token")
        user_id = data.get("user_id") or self.settings.user_id
        if not token or not user_id:
            raise GatewayAuthError({"gateway": ["Mercado Pago token response is missing token or user id"]})
        return Credential(token=f"{data.get('token_type', 'Bearer')} {token}", user_id=str(user_id))

    def _charge_body(self, order) -> dict:
        # The API takes JSON numbers; amounts are converted only at this boundary
        items = [
            {
                "sku_number": item.product_id,
                "category": item.category or "food",
                "title": item.name,
                "description": item.note or item.name,
                "unit_price": float(item.unit_price),
                "quantity": item.quantity,
                "unit_measure": "unit",
                "total_amount": float(item.line_total()),
            }
            for item in order.line_items()
        ]
        body = {
            "external_reference": order.id,
            "title": f"Order {order.id}",
            "description": f"Order {order.id}",
            "total_amount": float(order.total()),
            "items": items,
        }
        if self.settings.notification_url:
            body["notification_url"] = self.settings.notification_url
        return body

    def create_charge(self, credential: Credential, order) -> Charge:
        path = (
            f"/instore/orders/qr/seller/collectors/{credential.user_id}"
            f"/pos/{self.settings.external_pos_id}/qrs"
        )
        try:
            response = self.session.post(
                self._url(path),
                json=self._charge_body(order),
                headers={"Authorization": credential.token, "Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise GatewayRequestError({"gateway": [f"Failed to generate QR code link: {exc}"]}) from exc

        qr_data = data.get("qr_data")
        if not qr_data:
            raise GatewayRequestError({"gateway": ["Mercado Pago response carries no QR data"]})
        return Charge(external_reference=str(data.get("in_store_order_id") or order.id), qr_payload=qr_data)

    def get_charge_status(self, resource: str) -> ChargeStatus:
        merchant_order_id = resource.rstrip("/").rsplit("/", 1)[-1]
        credential = self.authenticate()
        try:
            response = self.session.get(
                self._url(f"/merchant_orders/{merchant_order_id}"),
                headers={"Authorization": credential.token},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise GatewayRequestError({"gateway": [f"Failed to get Mercado Pago data: {exc}"]}) from exc

        status = data.get("order_status") or data.get("status") or ""
        logger.debug("Merchant order fetched", merchant_order_id=merchant_order_id, status=status)
        return ChargeStatus(
            charge_id=str(data.get("id", merchant_order_id)),
            status=status,
            order_reference=data.get("external_reference"),
        )
