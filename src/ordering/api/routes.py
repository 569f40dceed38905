"""FastAPI routes for the Ordering domain — orders and their status."""

from fastapi import APIRouter, Depends

from bootstrap import Container, get_container
from ordering.api.schemas import (
    ChangeStatusRequest,
    CreateOrderRequest,
    OrderResponse,
    StatusResponse,
    UpdateOrderRequest,
)
from ordering.order.creation import CreateOrder
from ordering.order.lifecycle import ChangeOrderStatus
from ordering.order.management import UpdateOrder
from ordering.order.pricing import RequestedItem

order_router = APIRouter(prefix="/order", tags=["orders"])


def _requested(items) -> list[RequestedItem]:
    return [RequestedItem(product_id=item.product_id, quantity=item.quantity, note=item.note) for item in items]


@order_router.post("", status_code=201, response_model=OrderResponse)
def create_order(body: CreateOrderRequest, container: Container = Depends(get_container)) -> OrderResponse:
    command = CreateOrder(
        order_id=body.order_id,
        client_id=body.client_id,
        items=_requested(body.items),
    )
    order = container.order_creation.create_order(command)
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
def list_orders(container: Container = Depends(get_container)) -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in container.order_management.list_orders()]


@order_router.get("/status/active", response_model=list[OrderResponse])
def list_active_orders(container: Container = Depends(get_container)) -> list[OrderResponse]:
    """Paid orders the kitchen still has to finish, oldest first."""
    return [OrderResponse.from_order(order) for order in container.order_management.list_active_orders()]


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, container: Container = Depends(get_container)) -> OrderResponse:
    return OrderResponse.from_order(container.order_management.get_order(order_id))


@order_router.put("/{order_id}", response_model=OrderResponse)
def update_order(order_id: str, body: UpdateOrderRequest, container: Container = Depends(get_container)) -> OrderResponse:
    command = UpdateOrder(
        order_id=order_id,
        client_id=body.client_id,
        items=_requested(body.items) if body.items is not None else None,
    )
    return OrderResponse.from_order(container.order_management.update_order(command))


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
def change_order_status(
    order_id: str, body: ChangeStatusRequest, container: Container = Depends(get_container)
) -> OrderResponse:
    command = ChangeOrderStatus(order_id=order_id, status=body.status)
    return OrderResponse.from_order(container.lifecycle.change_status(command))


@order_router.delete("/{order_id}", response_model=StatusResponse)
def delete_order(order_id: str, container: Container = Depends(get_container)) -> StatusResponse:
    container.order_management.delete_order(order_id)
    return StatusResponse(status="deleted")
