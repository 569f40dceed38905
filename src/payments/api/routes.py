"""FastAPI routes for the Payments domain — payment requests and gateway webhooks."""

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Query

from bootstrap import Container, get_container
from payments.api.schemas import (
    ConfigureGatewayRequest,
    GatewayConfigResponse,
    PaymentHandleResponse,
    PaymentResponse,
    RequestPaymentRequest,
    SettleChargeRequest,
    StatusResponse,
    WebhookRequest,
    WebhookResponse,
)
from payments.gateway.fake_adapter import FakeGateway
from payments.payment.initiation import RequestPayment
from payments.payment.webhook import GatewayNotification
from shared.config import Environment
from shared.errors import ValidationError

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payment", tags=["payments"])


@payment_router.post("", status_code=201, response_model=PaymentHandleResponse)
def request_payment(body: RequestPaymentRequest, container: Container = Depends(get_container)) -> PaymentHandleResponse:
    """Create a gateway charge for an order awaiting payment."""
    handle = container.payment_orchestrator.request_payment(RequestPayment(order_id=body.order_id))
    return PaymentHandleResponse.from_handle(handle)


@payment_router.post("/webhook", response_model=WebhookResponse)
def process_webhook(
    body: WebhookRequest | None = Body(default=None),
    topic: str | None = Query(default=None),
    resource_id: str | None = Query(default=None, alias="id"),
    container: Container = Depends(get_container),
) -> WebhookResponse:
    """Process a gateway notification.

    Accepts the query-string form (``?topic=merchant_order&id=123``) and the
    JSON form (``{"topic": "merchant_order", "resource": "<url>"}``).
    """
    notification_topic = (body.topic if body else None) or topic
    resource = (body.resource if body else None) or resource_id
    if not notification_topic or not resource:
        raise ValidationError({"notification": ["Both topic and resource are required"]})

    logger.info("Webhook received", topic=notification_topic, resource=resource)
    outcome = container.webhook_reconciler.handle_notification(
        GatewayNotification(topic=notification_topic, resource=resource)
    )
    return WebhookResponse(outcome=outcome.value)


@payment_router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: str, container: Container = Depends(get_container)) -> PaymentResponse:
    return PaymentResponse.from_payment(container.payment_orchestrator.get_payment(payment_id))


# ---------------------------------------------------------------------------
# Fake gateway controls (non-production only)
# ---------------------------------------------------------------------------
def _fake_gateway(container: Container) -> FakeGateway:
    if container.settings.env == Environment.PRODUCTION:
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")
    if not isinstance(container.gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")
    return container.gateway


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
def configure_gateway(
    body: ConfigureGatewayRequest, container: Container = Depends(get_container)
) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior for manual API testing."""
    gateway = _fake_gateway(container)
    gateway.configure(
        auth_should_succeed=body.auth_should_succeed,
        charge_should_succeed=body.charge_should_succeed,
        failure_reason=body.failure_reason,
    )
    return GatewayConfigResponse(
        gateway=gateway.name,
        auth_should_succeed=gateway.auth_should_succeed,
        charge_should_succeed=gateway.charge_should_succeed,
        failure_reason=gateway.failure_reason,
    )


@payment_router.post("/gateway/charges/{charge_id}/settle", response_model=StatusResponse)
def settle_charge(
    charge_id: str, body: SettleChargeRequest, container: Container = Depends(get_container)
) -> StatusResponse:
    """Move a fake charge to a new status, as if the customer had paid (or not)."""
    gateway = _fake_gateway(container)
    try:
        gateway.settle(charge_id, body.status)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown charge '{charge_id}'") from None
    return StatusResponse(status=body.status)
