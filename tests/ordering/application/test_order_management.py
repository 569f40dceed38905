"""Application tests for order lookups, item changes and deletion."""

from decimal import Decimal

import pytest
from protean.exceptions import ValidationError

from menu.product.errors import ProductNotFound
from ordering.order.creation import CreateOrder
from ordering.order.errors import OrderNotFound
from ordering.order.management import UpdateOrder
from ordering.order.pricing import RequestedItem
from ordering.order.status import OrderStatus


@pytest.fixture()
def burger(make_product):
    return make_product()


@pytest.fixture()
def order(container, burger):
    return container.order_creation.create_order(
        CreateOrder(items=[RequestedItem(product_id=burger.id, quantity=1)])
    )


class TestGetOrder:
    def test_get_by_dashed_id(self, container, order):
        dashed = f"{order.id[:8]}-{order.id[8:12]}-{order.id[12:]}"
        assert container.order_management.get_order(dashed).id == order.id

    def test_missing(self, container):
        with pytest.raises(OrderNotFound):
            container.order_management.get_order("missing")


class TestUpdateOrder:
    def test_items_are_repriced(self, container, order, make_product):
        fries = make_product(name="Fries", unit_price="7.50")
        updated = container.order_management.update_order(
            UpdateOrder(order_id=order.id, items=[RequestedItem(product_id=fries.id, quantity=2)])
        )
        assert updated.total() == Decimal("15.00")
        assert container.orders.find(order.id).total() == Decimal("15.00")

    def test_unknown_product_leaves_order_untouched(self, container, order):
        with pytest.raises(ProductNotFound):
            container.order_management.update_order(
                UpdateOrder(order_id=order.id, items=[RequestedItem(product_id="ghost", quantity=1)])
            )
        assert container.orders.find(order.id).total() == Decimal("14.95")

    def test_paid_order_items_are_fixed(self, container, order, burger):
        container.lifecycle.transition(order.id, OrderStatus.RECEIVED)
        with pytest.raises(ValidationError):
            container.order_management.update_order(
                UpdateOrder(order_id=order.id, items=[RequestedItem(product_id=burger.id, quantity=3)])
            )


class TestDeleteOrder:
    def test_delete(self, container, order):
        container.order_management.delete_order(order.id)
        assert container.orders.exists(order.id) is False

    def test_delete_missing(self, container):
        with pytest.raises(OrderNotFound):
            container.order_management.delete_order("missing")
