"""Payment webhook processing — notification and reconciler.

Gateway notifications are hints, not facts: they may arrive late, twice or
out of order, and their payload is never trusted. For every notification on
a subscribed topic the reconciler asks the gateway for the charge's current
status and brings the Payment, and through the lifecycle the Order, in line
with it.

Outcomes:
- IGNORED: topic not subscribed
- UNKNOWN_STATUS: the gateway reported a status with no mapping
- PAYMENT_NOT_FOUND: no local payment matches the charge
- DUPLICATE: the payment already has that status
- APPLIED: payment (and order, if paid) updated
- DISCREPANCY: the gateway contradicts local state; noted on the payment,
  nothing forced
"""

from enum import Enum

import structlog
from pydantic import BaseModel

from ordering.order.lifecycle import OrderLifecycle
from ordering.order.order import Order, normalize_order_id
from ordering.order.repository import OrderRepository
from ordering.order.status import OrderStatus
from payments.gateway.errors import UnknownGatewayStatus
from payments.gateway.port import ChargeStatus, PaymentGateway
from payments.payment.payment import UNSUCCESSFUL_STATUSES, Payment, PaymentStatus
from payments.payment.policy import FailurePolicy, KeepOrderAwaitingPayment
from payments.payment.repository import PaymentRepository
from shared.errors import ValidationError

logger = structlog.get_logger(__name__)


class GatewayNotification(BaseModel):
    """A gateway callback: which topic, and which resource to look up."""

    topic: str
    resource: str


class ReconciliationOutcome(Enum):
    IGNORED = "IGNORED"
    APPLIED = "APPLIED"
    DUPLICATE = "DUPLICATE"
    DISCREPANCY = "DISCREPANCY"
    UNKNOWN_STATUS = "UNKNOWN_STATUS"
    PAYMENT_NOT_FOUND = "PAYMENT_NOT_FOUND"


class WebhookReconciler:
    def __init__(
        self,
        orders: OrderRepository,
        payments: PaymentRepository,
        gateway: PaymentGateway,
        lifecycle: OrderLifecycle,
        failure_policy: FailurePolicy | None = None,
        topics: list[str] | tuple[str, ...] = ("merchant_order",),
    ) -> None:
        self.orders = orders
        self.payments = payments
        self.gateway = gateway
        self.lifecycle = lifecycle
        self.failure_policy = failure_policy or KeepOrderAwaitingPayment()
        self.topics = {topic.strip().lower() for topic in topics}

    def handle_notification(self, notification: GatewayNotification) -> ReconciliationOutcome:
        topic = notification.topic.strip().lower()
        if topic not in self.topics:
            logger.info("Webhook ignored", topic=notification.topic, resource=notification.resource)
            return ReconciliationOutcome.IGNORED

        # Gateway errors propagate: the gateway will deliver again
        charge = self.gateway.get_charge_status(notification.resource)
        try:
            target = self.gateway.map_status(charge.status)
        except UnknownGatewayStatus as exc:
            logger.warning(
                "Webhook carried unknown gateway status",
                resource=notification.resource,
                charge_id=charge.charge_id,
                gateway_status=exc.status,
            )
            return ReconciliationOutcome.UNKNOWN_STATUS

        payment = self._find_payment(charge)
        if payment is None:
            logger.warning(
                "Webhook for unknown payment",
                resource=notification.resource,
                charge_id=charge.charge_id,
                order_reference=charge.order_reference,
            )
            return ReconciliationOutcome.PAYMENT_NOT_FOUND

        with self.lifecycle.locked(payment.order_id):
            # Re-read under the lock; another delivery may have won the race
            payment = self.payments.find(payment.id) or payment
            outcome = self._reconcile(payment, target)

        logger.info(
            "Webhook reconciled",
            payment_id=payment.id,
            order_id=payment.order_id,
            charge_id=charge.charge_id,
            payment_status=target.value,
            outcome=outcome.value,
        )
        return outcome

    def _find_payment(self, charge: ChargeStatus) -> Payment | None:
        payment = self.payments.find_by_external_reference(charge.charge_id)
        if payment is not None or not charge.order_reference:
            return payment
        try:
            order_id = normalize_order_id(charge.order_reference)
        except ValidationError:
            return None
        attempts = self.payments.find_by_order(order_id)
        return attempts[-1] if attempts else None

    def _reconcile(self, payment: Payment, target: PaymentStatus) -> ReconciliationOutcome:
        order = self.orders.find(payment.order_id)

        if payment.status == target.value:
            if (
                target == PaymentStatus.PAID
                and order is not None
                and order.status == OrderStatus.AWAITING_PAYMENT.value
            ):
                # Payment was recorded but the order never moved on
                return self._apply_paid(payment, order)
            return ReconciliationOutcome.DUPLICATE

        if not payment.can_transition(target):
            self._record_discrepancy(
                payment,
                f"Gateway reported {target.value} for a payment already {payment.status}",
            )
            return ReconciliationOutcome.DISCREPANCY

        current = PaymentStatus(payment.status)
        payment.record_status(target)
        self.payments.update_status(payment.id, target, expected=current)

        if target == PaymentStatus.PAID:
            return self._apply_paid(payment, order)
        if target in UNSUCCESSFUL_STATUSES and order is not None:
            self.failure_policy.apply(order, payment)
        return ReconciliationOutcome.APPLIED

    def _apply_paid(self, payment: Payment, order: Order | None) -> ReconciliationOutcome:
        if order is None:
            self._record_discrepancy(payment, f"Payment received for missing order {payment.order_id}")
            return ReconciliationOutcome.DISCREPANCY

        if order.status != OrderStatus.AWAITING_PAYMENT.value:
            self._record_discrepancy(payment, f"Payment received for an order already {order.status}")
            return ReconciliationOutcome.DISCREPANCY

        if order.total() != payment.charged_amount():
            self._record_discrepancy(
                payment, f"Payment of {payment.amount} received for an order now worth {order.value}"
            )
            return ReconciliationOutcome.DISCREPANCY

        if order.payment_id != payment.id:
            order.link_payment(payment.id, payment.payment_reference)
            self.orders.update(order)
            logger.info("Order relinked to paid payment", order_id=order.id, payment_id=payment.id)

        self.lifecycle.transition(order.id, OrderStatus.RECEIVED)
        return ReconciliationOutcome.APPLIED

    def _record_discrepancy(self, payment: Payment, note: str) -> None:
        payment = self.payments.record_discrepancy(payment.id, note)
        logger.warning(
            "Payment discrepancy",
            payment_id=payment.id,
            order_id=payment.order_id,
            payment_status=payment.status,
            discrepancy=note,
        )
