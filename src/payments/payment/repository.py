"""Repository for the Payment aggregate.

Payments are looked up three ways: by id, by the gateway's charge id
(``external_reference``) when a webhook arrives, and by order id when an
order's link to its payment has to be repaired.
"""

from protean.exceptions import ObjectNotFoundError

from payments.payment.errors import PaymentNotFound, StalePaymentState
from payments.payment.payment import Payment, PaymentStatus
from shared.domain import quickbite, utcnow
from shared.errors import ValidationError


@quickbite.repository(part_of=Payment)
class PaymentRepository:
    def find(self, payment_id: str) -> Payment | None:
        try:
            return self.get(payment_id)
        except ObjectNotFoundError:
            return None

    def create(self, payment: Payment) -> str:
        if self.find(payment.id) is not None:
            raise ValidationError({"payment_id": [f"Payment '{payment.id}' already exists"]})
        self.add(payment)
        return payment.id

    def update(self, payment: Payment) -> None:
        if self.find(payment.id) is None:
            raise PaymentNotFound(payment.id)
        self.add(payment)

    def update_status(self, payment_id: str, status: PaymentStatus, expected: PaymentStatus | None = None) -> None:
        """Write ``status`` only if the stored status is still ``expected``."""
        stored = self.find(payment_id)
        if stored is None:
            raise PaymentNotFound(payment_id)
        if expected is not None and stored.status != expected.value:
            raise StalePaymentState(payment_id, expected)
        stored.status = status.value
        stored.updated_at = utcnow()
        self.add(stored)

    def record_discrepancy(self, payment_id: str, note: str) -> Payment:
        """Attach ``note`` to the stored payment, leaving its status alone."""
        stored = self.find(payment_id)
        if stored is None:
            raise PaymentNotFound(payment_id)
        stored.record_discrepancy(note)
        self.add(stored)
        return stored

    def find_by_external_reference(self, external_reference: str) -> Payment | None:
        return self._dao.query.filter(external_reference=external_reference).all().first

    def find_by_order(self, order_id: str) -> list[Payment]:
        """Every payment attempt for the order, oldest first."""
        payments = self._dao.query.filter(order_id=order_id).all().items
        return sorted(payments, key=lambda payment: payment.created_at)

    def list_all(self) -> list[Payment]:
        payments = self._dao.query.all().items
        return sorted(payments, key=lambda payment: payment.created_at)
