"""Configurable fake payment gateway for development and testing.

This adapter simulates a real payment gateway without any external calls.
It can be configured at runtime to fail authentication or charge creation,
and charges can be settled by hand, making it useful for:
- Manual API testing (create an order, request payment, settle, notify)
- Automated tests with predictable outcomes
- Development without real gateway credentials

Notifications for fake charges use the ``merchant_order`` topic with the
charge id as resource.
"""

import threading
from uuid import uuid4

from payments.gateway.errors import GatewayAuthError, GatewayRequestError
from payments.gateway.port import Charge, ChargeStatus, Credential, PaymentGateway
from payments.payment.payment import PaymentStatus


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    name = "fake"
    status_map = {
        "pending": PaymentStatus.AWAITING,
        "paid": PaymentStatus.PAID,
        "failed": PaymentStatus.FAILED,
        "expired": PaymentStatus.EXPIRED,
    }

    def __init__(self) -> None:
        self.auth_should_succeed: bool = True
        self.charge_should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.calls: list[dict] = []
        self.charges: dict[str, dict] = {}
        self._lock = threading.Lock()

    def configure(
        self,
        auth_should_succeed: bool = True,
        charge_should_succeed: bool = True,
        failure_reason: str = "Gateway unavailable",
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.auth_should_succeed = auth_should_succeed
        self.charge_should_succeed = charge_should_succeed
        self.failure_reason = failure_reason

    def authenticate(self) -> Credential:
        self.calls.append({"method": "authenticate"})
        if not self.auth_should_succeed:
            raise GatewayAuthError({"gateway": [self.failure_reason]})
        return Credential(token=f"fake_token_{uuid4().hex[:12]}", user_id="fake-user")

    def create_charge(self, credential: Credential, order) -> Charge:
        self.calls.append(
            {
                "method": "create_charge",
                "token": credential.token,
                "order_id": order.id,
                "amount": order.total(),
            }
        )
        if not self.charge_should_succeed:
            raise GatewayRequestError({"gateway": [self.failure_reason]})

        charge_id = f"fake_chg_{uuid4().hex[:12]}"
        with self._lock:
            self.charges[charge_id] = {"status": "pending", "order_id": order.id, "amount": order.total()}
        return Charge(external_reference=charge_id, qr_payload=f"fakepay://{charge_id}?amount={order.value}")

    def settle(self, charge_id: str, status: str = "paid") -> None:
        """Move a charge to a new gateway-side status, as a paying customer would."""
        with self._lock:
            if charge_id not in self.charges:
                raise KeyError(charge_id)
            self.charges[charge_id]["status"] = status

    def get_charge_status(self, resource: str) -> ChargeStatus:
        self.calls.append({"method": "get_charge_status", "resource": resource})
        charge_id = resource.rstrip("/").rsplit("/", 1)[-1]
        with self._lock:
            charge = self.charges.get(charge_id)
            if charge is None:
                raise GatewayRequestError({"resource": [f"Unknown charge '{resource}'"]})
            return ChargeStatus(charge_id=charge_id, status=charge["status"], order_reference=charge["order_id"])
