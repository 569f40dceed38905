"""Order creation — command and handler."""

import structlog
from pydantic import BaseModel, Field

from customers.client.errors import ClientNotFound
from customers.client.repository import ClientRepository
from ordering.order.errors import EmptyOrder, OrderAlreadyExists
from ordering.order.order import Order, normalize_order_id
from ordering.order.pricing import PricingEngine, RequestedItem
from ordering.order.repository import OrderRepository

logger = structlog.get_logger(__name__)


class CreateOrder(BaseModel):
    order_id: str | None = None
    client_id: str | None = None
    items: list[RequestedItem] = Field(default_factory=list)


class CreateOrderHandler:
    def __init__(self, orders: OrderRepository, pricing: PricingEngine, clients: ClientRepository) -> None:
        self.orders = orders
        self.pricing = pricing
        self.clients = clients

    def create_order(self, command: CreateOrder) -> Order:
        """Price the requested items and persist the order as AWAITING_PAYMENT.

        Nothing is written unless every step succeeds: an empty item list, an
        unknown client, a duplicate order id or any unknown product rejects the
        whole request.
        """
        if not command.items:
            raise EmptyOrder()

        if command.order_id and self.orders.exists(normalize_order_id(command.order_id)):
            raise OrderAlreadyExists(normalize_order_id(command.order_id))

        if command.client_id and self.clients.find(command.client_id) is None:
            raise ClientNotFound(command.client_id)

        priced = self.pricing.price(command.items)

        order = Order.create(items=priced.items, client_id=command.client_id, order_id=command.order_id)
        order.await_payment()
        self.orders.create(order)

        logger.info(
            "Order created",
            order_id=order.id,
            client_id=order.client_id,
            item_count=len(order.line_items()),
            value=order.value,
        )
        return order
