"""Order lifecycle — serialized status changes.

Every status change for an order, whether requested by staff through the API
or driven by payment reconciliation, goes through ``OrderLifecycle``:

1. take the order's lock (re-entrant, keyed by order id),
2. load the order and check the transition against the lifecycle table,
3. write the new status conditionally on the status that was read.

Step 3 keeps writers in other processes honest too: if the stored status
moved in between, the write fails with ``StaleOrderState`` instead of
overwriting.
"""

import structlog
from pydantic import BaseModel

from ordering.order.errors import OrderNotFound
from ordering.order.order import Order, normalize_order_id
from ordering.order.repository import OrderRepository
from ordering.order.status import OrderStatus, parse_status
from shared.locks import KeyedLock

logger = structlog.get_logger(__name__)


class ChangeOrderStatus(BaseModel):
    order_id: str
    status: str


class OrderLifecycle:
    def __init__(self, orders: OrderRepository, locks: KeyedLock | None = None) -> None:
        self.orders = orders
        self.locks = locks if locks is not None else KeyedLock()

    def locked(self, order_id: str):
        """Context manager holding the order's lock."""
        return self.locks.hold(order_id)

    def transition(self, order_id: str, target: "OrderStatus | str") -> Order:
        order_id = normalize_order_id(order_id)
        target = parse_status(target)
        with self.locked(order_id):
            order = self.orders.find(order_id)
            if order is None:
                raise OrderNotFound(order_id)

            current = OrderStatus(order.status)
            order.transition_to(target)
            self.orders.update_status(order_id, target, expected=current)

        logger.info(
            "Order status changed",
            order_id=order_id,
            from_status=current.value,
            to_status=target.value,
        )
        return order

    def change_status(self, command: ChangeOrderStatus) -> Order:
        return self.transition(command.order_id, command.status)
