"""What happens to an order when its payment fails or expires.

The default keeps the order in AWAITING_PAYMENT so the client can request a
new charge. The cancel policy closes the order, but only when the failed
payment is still the one the order is linked to: a stale attempt never
cancels an order that already has a newer charge.
"""

import structlog

from ordering.order.lifecycle import OrderLifecycle
from ordering.order.order import Order
from ordering.order.status import OrderStatus
from payments.payment.payment import Payment
from shared.config import FailurePolicyName

logger = structlog.get_logger(__name__)


class FailurePolicy:
    name: str = "policy"

    def apply(self, order: Order, payment: Payment) -> bool:
        """Act on the order after ``payment`` failed. Returns True if the order changed."""
        raise NotImplementedError


class KeepOrderAwaitingPayment(FailurePolicy):
    name = FailurePolicyName.KEEP.value

    def apply(self, order: Order, payment: Payment) -> bool:
        return False


class CancelOrderOnFailure(FailurePolicy):
    name = FailurePolicyName.CANCEL.value

    def __init__(self, lifecycle: OrderLifecycle) -> None:
        self.lifecycle = lifecycle

    def apply(self, order: Order, payment: Payment) -> bool:
        if order.status != OrderStatus.AWAITING_PAYMENT.value or order.payment_id != payment.id:
            return False
        self.lifecycle.transition(order.id, OrderStatus.CANCELED)
        logger.info(
            "Order canceled after unsuccessful payment",
            order_id=order.id,
            payment_id=payment.id,
            payment_status=payment.status,
        )
        return True


def failure_policy(name: FailurePolicyName, lifecycle: OrderLifecycle) -> FailurePolicy:
    if name == FailurePolicyName.CANCEL:
        return CancelOrderOnFailure(lifecycle)
    return KeepOrderAwaitingPayment()
