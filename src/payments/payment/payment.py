"""Payment aggregate — one charge attempt against the payment gateway.

Payments are never deleted: every attempt stays on record, including the ones
that failed or expired. After creation, only webhook reconciliation changes a
payment's status.

State Machine:
    AWAITING → PAID | FAILED | EXPIRED
    FAILED → AWAITING (gateway retry) | PAID | EXPIRED
    PAID, EXPIRED are terminal
"""

from decimal import Decimal
from enum import Enum

from protean import atomic_change, invariant
from protean.fields import DateTime, Identifier, String, Text

from payments.payment.errors import InvalidPaymentTransition
from shared.domain import quickbite, utcnow
from shared.money import check_amount, format_amount, to_amount


class PaymentStatus(Enum):
    AWAITING = "AWAITING"
    PAID = "PAID"
    FAILED = "FAILED"
    EXPIRED = "EXPIRED"


_VALID_TRANSITIONS = {
    PaymentStatus.AWAITING: {PaymentStatus.PAID, PaymentStatus.FAILED, PaymentStatus.EXPIRED},
    PaymentStatus.FAILED: {PaymentStatus.AWAITING, PaymentStatus.PAID, PaymentStatus.EXPIRED},
    PaymentStatus.PAID: set(),  # Terminal
    PaymentStatus.EXPIRED: set(),  # Terminal
}

UNSUCCESSFUL_STATUSES = (PaymentStatus.FAILED, PaymentStatus.EXPIRED)


@quickbite.aggregate
class Payment:
    order_id = Identifier(required=True)
    amount = String(required=True, max_length=20)
    status = String(choices=PaymentStatus, default=PaymentStatus.AWAITING.value)
    gateway_name = String(required=True, max_length=50)
    external_reference = String(required=True, max_length=255)
    qr_payload = Text()
    payment_reference = Text()
    discrepancy = Text()
    created_at = DateTime(default=utcnow)
    updated_at = DateTime()

    @invariant.post
    def amount_must_be_a_valid_amount(self):
        check_amount("amount", self.amount)

    @classmethod
    def create(
        cls,
        order_id: str,
        amount: Decimal | str,
        gateway_name: str,
        external_reference: str,
        qr_payload: str | None = None,
        payment_reference: str | None = None,
    ):
        return cls(
            order_id=order_id,
            amount=format_amount(amount),
            gateway_name=gateway_name,
            external_reference=external_reference,
            qr_payload=qr_payload,
            payment_reference=payment_reference,
        )

    def charged_amount(self) -> Decimal:
        return to_amount(self.amount)

    def can_transition(self, target: PaymentStatus) -> bool:
        return target in _VALID_TRANSITIONS[PaymentStatus(self.status)]

    def _assert_can_transition(self, target: PaymentStatus) -> None:
        if not self.can_transition(target):
            raise InvalidPaymentTransition(PaymentStatus(self.status), target)

    def record_status(self, target: PaymentStatus) -> None:
        self._assert_can_transition(target)
        with atomic_change(self):
            self.status = target.value
            self.updated_at = utcnow()

    def record_discrepancy(self, note: str) -> None:
        with atomic_change(self):
            self.discrepancy = note
            self.updated_at = utcnow()
