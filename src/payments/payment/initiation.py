"""Payment initiation — command and orchestrator.

Requests a charge from the gateway for an order that awaits payment:

1. take the order's lifecycle lock,
2. authenticate against the gateway,
3. create the charge for the order's value,
4. render the charge's QR payload,
5. persist the Payment, then link it from the Order.

The lock is held for the whole request, so item changes, status changes and
deletions of the same order wait until the charge is linked. The link step
still re-reads the order and refuses to link a charge that no longer matches
it (different status, different value, or another payment linked meanwhile):
the payment is kept with a discrepancy note and ``StaleOrderState`` is raised.

The Payment is written before the Order link so a charge that exists on the
gateway is always findable locally. If the link write fails, the order is
repaired later by ``relink_orphaned_payments()`` or by webhook
reconciliation.
"""

from dataclasses import dataclass
from decimal import Decimal

import structlog
from pydantic import BaseModel

from ordering.order.errors import InvalidTransition, OrderNotFound, StaleOrderState
from ordering.order.lifecycle import OrderLifecycle
from ordering.order.order import Order, normalize_order_id
from ordering.order.repository import OrderRepository
from ordering.order.status import OrderStatus
from payments.gateway.port import PaymentGateway
from payments.gateway.qr import QrEncoder
from payments.payment.errors import PaymentNotFound
from payments.payment.payment import Payment, PaymentStatus
from payments.payment.repository import PaymentRepository

logger = structlog.get_logger(__name__)


class RequestPayment(BaseModel):
    """Request a gateway charge for an order."""

    order_id: str


@dataclass(frozen=True)
class PaymentHandle:
    payment_id: str
    order_id: str
    amount: Decimal
    status: PaymentStatus
    external_reference: str
    payment_reference: str | None


class PaymentOrchestrator:
    def __init__(
        self,
        orders: OrderRepository,
        payments: PaymentRepository,
        gateway: PaymentGateway,
        encoder: QrEncoder,
        lifecycle: OrderLifecycle,
    ) -> None:
        self.orders = orders
        self.payments = payments
        self.gateway = gateway
        self.encoder = encoder
        self.lifecycle = lifecycle

    def request_payment(self, command: RequestPayment | str) -> PaymentHandle:
        order_id = command.order_id if isinstance(command, RequestPayment) else command
        order_id = normalize_order_id(order_id)

        with self.lifecycle.locked(order_id):
            order = self.orders.find(order_id)
            if order is None:
                raise OrderNotFound(order_id)
            if order.status != OrderStatus.AWAITING_PAYMENT.value:
                # A paid or canceled order cannot be charged
                raise InvalidTransition(OrderStatus(order.status), OrderStatus.AWAITING_PAYMENT)

            credential = self.gateway.authenticate()
            charge = self.gateway.create_charge(credential, order)
            payment_reference = self.encoder.encode(charge.qr_payload)

            payment = Payment.create(
                order_id=order.id,
                amount=order.value,
                gateway_name=self.gateway.name,
                external_reference=charge.external_reference,
                qr_payload=charge.qr_payload,
                payment_reference=payment_reference,
            )
            self.payments.create(payment)
            logger.info(
                "Payment requested",
                payment_id=payment.id,
                order_id=order.id,
                amount=payment.amount,
                gateway=self.gateway.name,
                external_reference=payment.external_reference,
            )

            try:
                self._link(order.id, payment, expected_payment_id=order.payment_id)
            except StaleOrderState:
                raise
            except Exception:
                logger.exception("Linking payment to order failed", payment_id=payment.id, order_id=order.id)
                raise

        return PaymentHandle(
            payment_id=payment.id,
            order_id=order.id,
            amount=payment.charged_amount(),
            status=PaymentStatus(payment.status),
            external_reference=payment.external_reference,
            payment_reference=payment.payment_reference,
        )

    def _link(self, order_id: str, payment: Payment, expected_payment_id: str | None) -> None:
        with self.lifecycle.locked(order_id):
            order = self.orders.find(order_id)
            if order is None:
                raise OrderNotFound(order_id)

            conflict = self._link_conflict(order, payment, expected_payment_id)
            if conflict is not None:
                self.payments.record_discrepancy(payment.id, conflict)
                logger.warning(
                    "Payment not linked to order",
                    payment_id=payment.id,
                    order_id=order_id,
                    discrepancy=conflict,
                )
                raise StaleOrderState(order_id, OrderStatus.AWAITING_PAYMENT, reason=conflict)

            order.link_payment(payment.id, payment.payment_reference)
            self.orders.update(order)

    @staticmethod
    def _link_conflict(order: Order, payment: Payment, expected_payment_id: str | None) -> str | None:
        """Describe why ``payment`` no longer fits ``order``, or return None."""
        if order.status != OrderStatus.AWAITING_PAYMENT.value:
            return f"Order became {order.status} while the charge was being created"
        if order.total() != payment.charged_amount():
            return f"Order value changed to {order.value} while a charge for {payment.amount} was being created"
        if order.payment_id != expected_payment_id:
            return f"Order was linked to payment {order.payment_id} while the charge was being created"
        return None

    def get_payment(self, payment_id: str) -> Payment:
        payment = self.payments.find(payment_id)
        if payment is None:
            raise PaymentNotFound(payment_id)
        return payment

    def relink_orphaned_payments(self) -> list[str]:
        """Point unpaid orders at their latest payment attempt when the link is missing.

        Attempts that no longer match their order are left unlinked. Returns
        the ids of the orders that were repaired.
        """
        repaired = []
        for order in self.orders.list_all():
            if order.status != OrderStatus.AWAITING_PAYMENT.value:
                continue
            attempts = self.payments.find_by_order(order.id)
            if not attempts:
                continue
            latest = attempts[-1]
            if order.payment_id == latest.id:
                continue
            try:
                self._link(order.id, latest, expected_payment_id=order.payment_id)
            except StaleOrderState:
                continue
            repaired.append(order.id)
            logger.warning("Relinked orphaned payment", order_id=order.id, payment_id=latest.id)
        return repaired
