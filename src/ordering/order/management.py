"""Order management — lookups, item changes and deletion."""

import structlog
from pydantic import BaseModel

from customers.client.errors import ClientNotFound
from customers.client.repository import ClientRepository
from ordering.order.errors import OrderNotFound
from ordering.order.lifecycle import OrderLifecycle
from ordering.order.order import Order, normalize_order_id
from ordering.order.pricing import PricingEngine, RequestedItem
from ordering.order.repository import OrderRepository

logger = structlog.get_logger(__name__)


class UpdateOrder(BaseModel):
    order_id: str
    client_id: str | None = None
    items: list[RequestedItem] | None = None


class OrderManagementHandler:
    def __init__(
        self,
        orders: OrderRepository,
        pricing: PricingEngine,
        clients: ClientRepository,
        lifecycle: OrderLifecycle,
    ) -> None:
        self.orders = orders
        self.pricing = pricing
        self.clients = clients
        self.lifecycle = lifecycle

    def get_order(self, order_id: str) -> Order:
        order_id = normalize_order_id(order_id)
        order = self.orders.find(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def list_orders(self) -> list[Order]:
        return self.orders.list_all()

    def list_active_orders(self) -> list[Order]:
        return self.orders.list_active()

    def update_order(self, command: UpdateOrder) -> Order:
        """Change the client and/or items of an order that is still unpaid.

        New items are priced again against the current menu; the stored value
        is always the recomputed one.
        """
        order_id = normalize_order_id(command.order_id)
        if command.client_id and self.clients.find(command.client_id) is None:
            raise ClientNotFound(command.client_id)

        with self.lifecycle.locked(order_id):
            order = self.get_order(order_id)
            if command.items is not None:
                priced = self.pricing.price(command.items)
                order.replace_items(priced.items)
            if command.client_id is not None:
                order.client_id = command.client_id
            self.orders.update(order)

        logger.info("Order updated", order_id=order_id, value=order.value)
        return order

    def delete_order(self, order_id: str) -> None:
        order_id = normalize_order_id(order_id)
        with self.lifecycle.locked(order_id):
            self.get_order(order_id)
            self.orders.delete(order_id)
        logger.info("Order deleted", order_id=order_id)
