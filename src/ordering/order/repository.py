"""Repository for the Order aggregate.

- ``create()`` refuses an id that is already taken with ``OrderAlreadyExists``.
- ``update_status(..., expected=...)`` is a conditional write. If the stored
  status is no longer ``expected`` nothing is written and ``StaleOrderState``
  is raised. Callers hold the order's lifecycle lock around it, so the
  read-compare-write cannot interleave with another writer in this process.
- ``list_active()`` returns paid, kitchen-facing orders oldest first.
"""

from protean.exceptions import ObjectNotFoundError

from ordering.order.errors import OrderAlreadyExists, OrderNotFound, StaleOrderState
from ordering.order.order import Order
from ordering.order.status import ACTIVE_STATUSES, OrderStatus
from shared.domain import quickbite, utcnow

_ACTIVE_VALUES = {status.value for status in ACTIVE_STATUSES}


@quickbite.repository(part_of=Order)
class OrderRepository:
    def find(self, order_id: str) -> Order | None:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            return None

    def exists(self, order_id: str) -> bool:
        return self.find(order_id) is not None

    def create(self, order: Order) -> str:
        if self.exists(order.id):
            raise OrderAlreadyExists(order.id)
        self.add(order)
        return order.id

    def update(self, order: Order) -> None:
        """Overwrite every field of an existing order."""
        if not self.exists(order.id):
            raise OrderNotFound(order.id)
        self.add(order)

    def update_status(self, order_id: str, status: OrderStatus, expected: OrderStatus | None = None) -> None:
        stored = self.find(order_id)
        if stored is None:
            raise OrderNotFound(order_id)
        if expected is not None and stored.status != expected.value:
            raise StaleOrderState(order_id, expected)
        stored.status = status.value
        stored.updated_at = utcnow()
        self.add(stored)

    def list_all(self) -> list[Order]:
        orders = self._dao.query.all().items
        return sorted(orders, key=lambda order: order.created_at)

    def list_active(self) -> list[Order]:
        orders = [
            order
            for order in self._dao.query.all().items
            if order.status in _ACTIVE_VALUES and order.payment_reference is not None
        ]
        return sorted(orders, key=lambda order: order.created_at)

    def delete(self, order_id: str) -> None:
        order = self.find(order_id)
        if order is not None:
            self._dao.delete(order)
