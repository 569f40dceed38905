"""Payment gateway factory.

``build_gateway()`` picks the implementation from settings:
- FakeGateway for development and testing
- MercadoPagoGateway for production

The gateway is built once by the composition root and injected; there is no
module-level current gateway.
"""

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.mercadopago_adapter import MercadoPagoGateway
from payments.gateway.port import PaymentGateway
from shared.config import Settings


def build_gateway(settings: Settings) -> PaymentGateway:
    if settings.gateway == "mercadopago":
        return MercadoPagoGateway(settings.mercadopago, timeout=settings.gateway_timeout)
    return FakeGateway()


__all__ = ["FakeGateway", "MercadoPagoGateway", "PaymentGateway", "build_gateway"]
