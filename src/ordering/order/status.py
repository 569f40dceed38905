"""Order status vocabulary and the lifecycle transition table.

State Machine:
    CREATED → AWAITING_PAYMENT → RECEIVED → IN_PREPARATION → READY → COMPLETED
    CANCELED (from any non-terminal state)

CREATED exists only while an order is being priced; orders are persisted
once they reach AWAITING_PAYMENT.
"""

from enum import Enum

from ordering.order.errors import InvalidStatusValue, InvalidTransition


class OrderStatus(Enum):
    CREATED = "CREATED"
    AWAITING_PAYMENT = "AWAITING_PAYMENT"
    RECEIVED = "RECEIVED"
    IN_PREPARATION = "IN_PREPARATION"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


_VALID_TRANSITIONS = {
    OrderStatus.CREATED: {OrderStatus.AWAITING_PAYMENT, OrderStatus.CANCELED},
    OrderStatus.AWAITING_PAYMENT: {OrderStatus.RECEIVED, OrderStatus.CANCELED},
    OrderStatus.RECEIVED: {OrderStatus.IN_PREPARATION, OrderStatus.CANCELED},
    OrderStatus.IN_PREPARATION: {OrderStatus.READY, OrderStatus.CANCELED},
    OrderStatus.READY: {OrderStatus.COMPLETED, OrderStatus.CANCELED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELED: set(),  # Terminal
}

# Kitchen-facing states: paid and in progress
ACTIVE_STATUSES = (OrderStatus.RECEIVED, OrderStatus.IN_PREPARATION, OrderStatus.READY)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in _VALID_TRANSITIONS[current]


def assert_can_transition(current: OrderStatus, target: OrderStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(current, target)


def parse_status(value: "str | OrderStatus") -> OrderStatus:
    """Turn caller input into an ``OrderStatus``; accepts any letter case."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).strip().upper())
    except ValueError:
        raise InvalidStatusValue(value) from None
