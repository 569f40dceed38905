from shared.errors import ObjectNotFoundError, StaleStateError, ValidationError


class PaymentNotFound(ObjectNotFoundError):
    def __init__(self, payment_id: str) -> None:
        self.payment_id = payment_id
        super().__init__({"payment_id": [f"Payment '{payment_id}' does not exist"]})


class InvalidPaymentTransition(ValidationError):
    def __init__(self, current, target) -> None:
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition payment from {current.value} to {target.value}"]})


class StalePaymentState(StaleStateError):
    def __init__(self, payment_id: str, expected) -> None:
        self.payment_id = payment_id
        self.expected = expected
        super().__init__({"status": [f"Payment '{payment_id}' is no longer {expected.value}"]})
