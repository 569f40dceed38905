from shared.errors import ObjectNotFoundError, StaleStateError, ValidationError


class OrderNotFound(ObjectNotFoundError):
    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__({"order_id": [f"Order '{order_id}' does not exist"]})


class OrderAlreadyExists(ValidationError):
    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__({"order_id": [f"Order '{order_id}' already exists"]})


class EmptyOrder(ValidationError):
    def __init__(self) -> None:
        super().__init__({"items": ["Order must have at least one item"]})


class InvalidQuantity(ValidationError):
    pass


class InvalidTransition(ValidationError):
    def __init__(self, current, target) -> None:
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current.value} to {target.value}"]})


class InvalidStatusValue(ValidationError):
    def __init__(self, value) -> None:
        self.value = value
        super().__init__({"status": [f"'{value}' is not a valid order status"]})


class StaleOrderState(StaleStateError):
    def __init__(self, order_id: str, expected, reason: str | None = None) -> None:
        self.order_id = order_id
        self.expected = expected
        super().__init__({"status": [reason or f"Order '{order_id}' is no longer {expected.value}"]})
