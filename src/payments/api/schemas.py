"""Pydantic request/response schemas for the Payments API.

These are external contracts (anti-corruption layer) — separate from
internal commands.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Payment Request Schemas
# ---------------------------------------------------------------------------
class RequestPaymentRequest(BaseModel):
    order_id: str = Field(min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_id": "9f8e7d6c5b4a43210fedcba987654321",
                }
            ]
        }
    }


class WebhookRequest(BaseModel):
    """Notification body as the gateway posts it: ``{"topic": ..., "resource": ...}``."""

    topic: str | None = None
    resource: str | None = None


class ConfigureGatewayRequest(BaseModel):
    auth_should_succeed: bool = True
    charge_should_succeed: bool = True
    failure_reason: str = "Gateway unavailable"


class SettleChargeRequest(BaseModel):
    status: str = "paid"


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class PaymentHandleResponse(BaseModel):
    payment_id: str
    order_id: str
    amount: Decimal
    status: str
    external_reference: str
    payment_reference: str | None = None

    @classmethod
    def from_handle(cls, handle) -> "PaymentHandleResponse":
        return cls(
            payment_id=handle.payment_id,
            order_id=handle.order_id,
            amount=handle.amount,
            status=handle.status.value,
            external_reference=handle.external_reference,
            payment_reference=handle.payment_reference,
        )


class PaymentResponse(BaseModel):
    id: str
    order_id: str
    amount: Decimal
    status: str
    gateway_name: str
    external_reference: str
    payment_reference: str | None = None
    discrepancy: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_payment(cls, payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            order_id=payment.order_id,
            amount=payment.charged_amount(),
            status=payment.status,
            gateway_name=payment.gateway_name,
            external_reference=payment.external_reference,
            payment_reference=payment.payment_reference,
            discrepancy=payment.discrepancy,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )


class WebhookResponse(BaseModel):
    status: str = "processed"
    outcome: str


class StatusResponse(BaseModel):
    status: str


class GatewayConfigResponse(BaseModel):
    gateway: str
    auth_should_succeed: bool
    charge_should_succeed: bool
    failure_reason: str
