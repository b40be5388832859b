"""FastAPI endpoints for the Ordering domain."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.identity.access import Actor
from storefront.identity.api.dependencies import current_actor
from storefront.ordering.api.schemas import (
    CreateOrderRequest,
    OrderCreatedResponse,
    OrderResponse,
    StatusChangeRequest,
)
from storefront.ordering.order.creation import CreateOrder
from storefront.ordering.order.history import get_history, get_order, list_orders
from storefront.ordering.order.lifecycle import TransitionStatus
from storefront.shared.payload import encode

router = APIRouter(prefix="/orders", tags=["orders"])
admin_router = APIRouter(prefix="/admin/orders", tags=["admin"])


@router.post("", status_code=201, response_model=OrderCreatedResponse)
async def create_order(body: CreateOrderRequest, actor: Actor = Depends(current_actor)) -> OrderCreatedResponse:
    command = CreateOrder(
        user_id=body.user_id,
        customer_name=body.customer_name,
        address=body.address,
        phone=body.phone,
        payment_method=body.payment_method,
        notes=body.notes,
        lines=encode([line.model_dump() for line in body.lines]),
        total=body.total,
        **actor.stamp(),
    )
    return OrderCreatedResponse(**current_domain.process(command, asynchronous=False))


@router.get("/history/{user_id}", response_model=list[OrderResponse])
async def order_history(user_id: int, actor: Actor = Depends(current_actor)) -> list[OrderResponse]:
    return [OrderResponse(**order) for order in get_history(actor, user_id)]


@router.get("/{order_id}", response_model=OrderResponse)
async def order(order_id: int, actor: Actor = Depends(current_actor)) -> OrderResponse:
    return OrderResponse(**get_order(actor, order_id))


@admin_router.get("", response_model=list[OrderResponse])
async def all_orders(actor: Actor = Depends(current_actor)) -> list[OrderResponse]:
    return [OrderResponse(**order) for order in list_orders(actor)]


@admin_router.put("/{order_id}/status", response_model=OrderResponse)
async def change_status(
    order_id: int, body: StatusChangeRequest, actor: Actor = Depends(current_actor)
) -> OrderResponse:
    command = TransitionStatus(order_id=order_id, status=body.status, **actor.stamp())
    return OrderResponse(**current_domain.process(command, asynchronous=False))
