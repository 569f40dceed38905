"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal commands. Prices never come in through these schemas: the server
prices every order from the menu.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class OrderItemRequest(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int
    note: str | None = Field(default=None, max_length=500)


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    category: str | None = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    note: str | None = None

    @classmethod
    def from_item(cls, item) -> "OrderItemResponse":
        return cls(
            product_id=item.product_id,
            name=item.name,
            category=item.category,
            quantity=item.quantity,
            unit_price=item.price(),
            line_total=item.line_total(),
            note=item.note,
        )


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    order_id: str | None = None
    client_id: str | None = None
    items: list[OrderItemRequest] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "client_id": None,
                    "items": [
                        {"product_id": "c3f1e8a2b4d94f0e8a7b6c5d4e3f2a1b", "quantity": 2, "note": "no onions"},
                    ],
                }
            ]
        }
    }


class UpdateOrderRequest(BaseModel):
    client_id: str | None = None
    items: list[OrderItemRequest] | None = None


class ChangeStatusRequest(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderResponse(BaseModel):
    id: str
    client_id: str | None = None
    status: str
    items: list[OrderItemResponse]
    value: Decimal
    payment_reference: str | None = None
    payment_id: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=order.id,
            client_id=order.client_id,
            status=order.status,
            items=[OrderItemResponse.from_item(item) for item in order.line_items()],
            value=order.total(),
            payment_reference=order.payment_reference,
            payment_id=order.payment_id,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class StatusResponse(BaseModel):
    status: str = "ok"
