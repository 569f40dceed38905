"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and MercadoPagoGateway
(production) without changing any domain or application code.

A charge is created in two calls (token exchange, then the charge itself).
Gateway status vocabulary stays inside the adapter: ``map_status()``
translates it to ``PaymentStatus``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from payments.gateway.errors import UnknownGatewayStatus
from payments.payment.payment import PaymentStatus

if TYPE_CHECKING:
    from ordering.order.order import Order


@dataclass(frozen=True)
class Credential:
    """Access token issued by the gateway."""

    token: str
    user_id: str | None = None


@dataclass(frozen=True)
class Charge:
    """A charge created on the gateway, with the data to render as a QR code."""

    external_reference: str
    qr_payload: str


@dataclass(frozen=True)
class ChargeStatus:
    """Authoritative charge state as reported by the gateway."""

    charge_id: str
    status: str
    order_reference: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    name: str = "gateway"
    status_map: dict[str, PaymentStatus] = {}

    @abstractmethod
    def authenticate(self) -> Credential:
        """Exchange configured credentials for an access token."""
        ...

    @abstractmethod
    def create_charge(self, credential: Credential, order: "Order") -> Charge:
        """Create a charge for the order's value."""
        ...

    @abstractmethod
    def get_charge_status(self, resource: str) -> ChargeStatus:
        """Fetch the current state of the charge a notification points at."""
        ...

    def map_status(self, gateway_status: str) -> PaymentStatus:
        try:
            return self.status_map[gateway_status.strip().lower()]
        except (KeyError, AttributeError):
            raise UnknownGatewayStatus(str(gateway_status)) from None
