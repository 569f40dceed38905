"""Order aggregate — the core of the ordering domain.

An Order owns its line items. Each line item is a snapshot of the product at
order time (name, category, unit price), so the order's value never moves
when the menu changes. The value itself is always computed here from the
items; no caller can set it.

Line items are kept as a JSON list in ``items`` and read back as
``OrderLineItem`` value objects through ``line_items()``.

Status changes go through ``transition_to()``, which enforces the lifecycle
table in ``ordering.order.status``.
"""

import json
from decimal import Decimal
from uuid import uuid4

from protean import atomic_change, invariant
from protean.fields import DateTime, Identifier, Integer, String, Text

from ordering.order.errors import EmptyOrder
from ordering.order.status import OrderStatus, assert_can_transition
from shared.domain import quickbite, utcnow
from shared.errors import ValidationError
from shared.money import check_amount, format_amount, to_amount

_SEPARATORS = ("-", " ", "_", "{", "}")


def new_order_id() -> str:
    return uuid4().hex


def normalize_order_id(order_id: str) -> str:
    """Strip separator characters so ``a1-b2`` and ``a1b2`` name the same order."""
    normalized = str(order_id)
    for separator in _SEPARATORS:
        normalized = normalized.replace(separator, "")
    if not normalized:
        raise ValidationError({"order_id": ["Order id cannot be empty"]})
    return normalized


@quickbite.value_object
class OrderLineItem:
    """A quantity of one product, priced at order time."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    category = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    unit_price = String(required=True, max_length=20)
    note = String(max_length=500)

    @invariant.post
    def unit_price_must_be_a_valid_amount(self):
        check_amount("unit_price", self.unit_price)

    def price(self) -> Decimal:
        return to_amount(self.unit_price)

    def line_total(self) -> Decimal:
        return self.price() * self.quantity


def sum_line_totals(items: list[OrderLineItem]) -> Decimal:
    return sum((item.line_total() for item in items), Decimal("0"))


def _dump_items(items: list[OrderLineItem]) -> str:
    return json.dumps([item.to_dict() for item in items])


@quickbite.aggregate
class Order:
    client_id = Identifier()
    status = String(choices=OrderStatus, default=OrderStatus.CREATED.value)
    items = Text(required=True)
    value = String(required=True, max_length=20)
    payment_reference = Text()
    payment_id = Identifier()
    created_at = DateTime(default=utcnow)
    updated_at = DateTime()

    @invariant.post
    def must_have_at_least_one_item(self):
        if not json.loads(self.items or "[]"):
            raise EmptyOrder()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, items: list[OrderLineItem], client_id: str | None = None, order_id: str | None = None):
        """Create an order in CREATED state from already priced line items."""
        if not items:
            raise EmptyOrder()

        return cls(
            id=normalize_order_id(order_id) if order_id else new_order_id(),
            client_id=client_id,
            items=_dump_items(items),
            value=format_amount(sum_line_totals(items)),
        )

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def line_items(self) -> list[OrderLineItem]:
        return [OrderLineItem(**item) for item in json.loads(self.items)]

    def total(self) -> Decimal:
        return to_amount(self.value)

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def transition_to(self, target: OrderStatus) -> None:
        assert_can_transition(OrderStatus(self.status), target)
        with atomic_change(self):
            self.status = target.value
            self.updated_at = utcnow()

    def await_payment(self) -> None:
        self.transition_to(OrderStatus.AWAITING_PAYMENT)

    # -------------------------------------------------------------------
    # Payment link and modification
    # -------------------------------------------------------------------
    def link_payment(self, payment_id: str | None, payment_reference: str | None) -> None:
        with atomic_change(self):
            self.payment_id = payment_id
            self.payment_reference = payment_reference
            self.updated_at = utcnow()

    def replace_items(self, items: list[OrderLineItem]) -> None:
        """Swap the line items of an unpaid order and recompute its value."""
        if not items:
            raise EmptyOrder()
        if OrderStatus(self.status) != OrderStatus.AWAITING_PAYMENT:
            raise ValidationError({"status": ["Items can only be changed while the order awaits payment"]})
        if self.payment_id is not None:
            raise ValidationError({"items": ["Items cannot change once payment has been requested"]})

        with atomic_change(self):
            self.items = _dump_items(items)
            self.value = format_amount(sum_line_totals(items))
            self.updated_at = utcnow()
