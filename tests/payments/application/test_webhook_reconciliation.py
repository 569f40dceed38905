"""Application tests for gateway webhook reconciliation."""

import threading
from unittest.mock import patch

import pytest

from ordering.order.creation import CreateOrder
from ordering.order.pricing import RequestedItem
from ordering.order.status import OrderStatus
from payments.gateway.errors import GatewayRequestError
from payments.payment.payment import PaymentStatus
from payments.payment.webhook import GatewayNotification, ReconciliationOutcome
from shared.domain import quickbite


def _order_with_payment(container, make_product):
    burger = make_product()
    order = container.order_creation.create_order(
        CreateOrder(items=[RequestedItem(product_id=burger.id, quantity=2)])
    )
    handle = container.payment_orchestrator.request_payment(order.id)
    return order, handle


def _notify(container, charge_id, topic="merchant_order"):
    return container.webhook_reconciler.handle_notification(GatewayNotification(topic=topic, resource=charge_id))


class TestPaidNotification:
    def test_paid_moves_order_to_received(self, container, gateway, make_product):
        order, handle = _order_with_payment(container, make_product)
        gateway.settle(handle.external_reference, "paid")

        assert _notify(container, handle.external_reference) == ReconciliationOutcome.APPLIED
        assert container.payments.find(handle.payment_id).status == PaymentStatus.PAID.value
        assert container.orders.find(order.id).status == OrderStatus.RECEIVED.value

    def test_redelivery_is_idempotent(self, container, gateway, make_product):
        order, handle = _order_with_payment(container, make_product)
        gateway.settle(handle.external_reference, "paid")
        _notify(container, handle.external_reference)

        payments, lifecycle = container.payments, container.lifecycle
        with (
            patch.object(payments, "update_status", wraps=payments.update_status) as payment_writes,
            patch.object(lifecycle, "transition", wraps=lifecycle.transition) as transitions,
        ):
            assert _notify(container, handle.external_reference) == ReconciliationOutcome.DUPLICATE
        assert payment_writes.call_count == 0
        assert transitions.call_count == 0
        assert container.orders.find(order.id).status == OrderStatus.RECEIVED.value

    def test_concurrent_duplicates_apply_once(self, container, gateway, make_product):
        order, handle = _order_with_payment(container, make_product)
        gateway.settle(handle.external_reference, "paid")
        lifecycle = container.lifecycle

        barrier = threading.Barrier(5)
        outcomes = []

        def deliver():
            with quickbite.domain_context():
                barrier.wait()
                outcomes.append(_notify(container, handle.external_reference))

        threads = [threading.Thread(target=deliver) for _ in range(5)]
        with patch.object(lifecycle, "transition", wraps=lifecycle.transition) as transitions:
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        assert outcomes.count(ReconciliationOutcome.APPLIED) == 1
        assert outcomes.count(ReconciliationOutcome.DUPLICATE) == 4
        assert transitions.call_count == 1
        assert container.orders.find(order.id).status == OrderStatus.RECEIVED.value

    def test_replays_order_transition_after_partial_write(self, container, gateway, make_product):
        order, handle = _order_with_payment(container, make_product)
        gateway.settle(handle.external_reference, "paid")
        # Payment written, order transition lost
        container.payments.update_status(handle.payment_id, PaymentStatus.PAID)

        assert _notify(container, handle.external_reference) == ReconciliationOutcome.APPLIED
        assert container.orders.find(order.id).status == OrderStatus.RECEIVED.value

    def test_canceled_order_is_not_revived(self, container, gateway, make_product):
        order, handle = _order_with_payment(container, make_product)
        container.lifecycle.transition(order.id, OrderStatus.CANCELED)
        gateway.settle(handle.external_reference, "paid")

        assert _notify(container, handle.external_reference) == ReconciliationOutcome.DISCREPANCY
        payment = container.payments.find(handle.payment_id)
        assert payment.status == PaymentStatus.PAID.value
        assert "CANCELED" in payment.discrepancy
        assert container.orders.find(order.id).status == OrderStatus.CANCELED.value

    def test_repairs_missing_order_link(self, container, gateway, make_product):
        order, handle = _order_with_payment(container, make_product)
        stored = container.orders.find(order.id)
        stored.link_payment(None, None)
        container.orders.update(stored)
        gateway.settle(handle.external_reference, "paid")

        _notify(container, handle.external_reference)

        repaired = container.orders.find(order.id)
        assert repaired.payment_id == handle.payment_id
        assert repaired.payment_reference == handle.payment_reference
        assert repaired.status == OrderStatus.RECEIVED.value


class TestUnsuccessfulNotification:
    @pytest.mark.parametrize(
        "gateway_status,expected",
        [("failed", PaymentStatus.FAILED), ("expired", PaymentStatus.EXPIRED)],
    )
    def test_order_keeps_awaiting_payment_by_default(self, container, gateway, make_product, gateway_status, expected):
        order, handle = _order_with_payment(container, make_product)
        gateway.settle(handle.external_reference, gateway_status)

        assert _notify(container, handle.external_reference) == ReconciliationOutcome.APPLIED
        assert container.payments.find(handle.payment_id).status == expected.value
        assert container.orders.find(order.id).status == OrderStatus.AWAITING_PAYMENT.value

    def test_failed_then_paid(self, container, gateway, make_product):
        order, handle = _order_with_payment(container, make_product)
        gateway.settle(handle.external_reference, "failed")
        _notify(container, handle.external_reference)
        gateway.settle(handle.external_reference, "paid")

        assert _notify(container, handle.external_reference) == ReconciliationOutcome.APPLIED
        assert container.orders.find(order.id).status == OrderStatus.RECEIVED.value

    def test_regression_is_recorded_not_applied(self, container, gateway, make_product):
        order, handle = _order_with_payment(container, make_product)
        gateway.settle(handle.external_reference, "paid")
        _notify(container, handle.external_reference)
        gateway.settle(handle.external_reference, "pending")

        assert _notify(container, handle.external_reference) == ReconciliationOutcome.DISCREPANCY
        payment = container.payments.find(handle.payment_id)
        assert payment.status == PaymentStatus.PAID.value
        assert payment.discrepancy is not None
        assert container.orders.find(order.id).status == OrderStatus.RECEIVED.value


class TestNotificationFiltering:
    def test_other_topics_ignored(self, container, gateway, make_product):
        _, handle = _order_with_payment(container, make_product)
        assert _notify(container, handle.external_reference, topic="payment") == ReconciliationOutcome.IGNORED
        assert not [call for call in gateway.calls if call["method"] == "get_charge_status"]

    def test_unknown_gateway_status(self, container, gateway, make_product):
        order, handle = _order_with_payment(container, make_product)
        gateway.settle(handle.external_reference, "chargeback")

        assert _notify(container, handle.external_reference) == ReconciliationOutcome.UNKNOWN_STATUS
        assert container.payments.find(handle.payment_id).status == PaymentStatus.AWAITING.value
        assert container.orders.find(order.id).status == OrderStatus.AWAITING_PAYMENT.value

    def test_unknown_payment(self, container, gateway, make_product):
        # A charge on the gateway that no local payment refers to
        order, _ = _order_with_payment(container, make_product)
        charge = gateway.create_charge(gateway.authenticate(), container.orders.find(order.id))
        gateway.charges[charge.external_reference]["order_id"] = "elsewhere"

        assert _notify(container, charge.external_reference) == ReconciliationOutcome.PAYMENT_NOT_FOUND

    def test_falls_back_to_order_reference(self, container, gateway, make_product):
        order, handle = _order_with_payment(container, make_product)
        # Gateway reports a charge id we never stored, but echoes our order id
        charge = gateway.create_charge(gateway.authenticate(), container.orders.find(order.id))
        gateway.settle(charge.external_reference, "paid")

        assert _notify(container, charge.external_reference) == ReconciliationOutcome.APPLIED
        assert container.payments.find(handle.payment_id).status == PaymentStatus.PAID.value
        assert container.orders.find(order.id).status == OrderStatus.RECEIVED.value

    def test_gateway_failure_propagates(self, container):
        with pytest.raises(GatewayRequestError):
            _notify(container, "never-issued")
