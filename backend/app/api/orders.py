"""
Orders API Endpoints
Handles order placement, queries and lifecycle

Author: DSW
Date: 2025-10-17
"""
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import sessionmaker
from typing import List
from uuid import UUID

from app.core.auth import ADMIN, TokenUser, ensure_can_act_for, get_current_user, require_role
from app.core.database import get_session_factory
from app.core.exceptions import NotFoundError
from app.domain.order import OrderCreate, OrderStatusUpdate, OrderView
from app.services.order_service import OrderService

router = APIRouter()


def get_order_service(session_factory: sessionmaker = Depends(get_session_factory)) -> OrderService:
    return OrderService(session_factory)


@router.post("/", response_model=OrderView, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    request: Request,
    response: Response,
    user: TokenUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """
    Place an order

    Customers may only order for themselves; admins for anyone.
    Returns 404 for unknown customer/product and 409 for insufficient stock.
    """
    ensure_can_act_for(user, payload.customer_id)

    order = service.create_order(
        payload.customer_id,
        payload.shipping_address,
        payload.billing_address,
        payload.items,
    )
    response.headers["Location"] = str(request.url_for("get_order", order_id=order.id))
    return order


@router.get("/", response_model=List[OrderView])
def get_orders(
    user: TokenUser = Depends(require_role(ADMIN)),
    service: OrderService = Depends(get_order_service),
):
    """Get all orders (admin only)"""
    return service.list_orders()


@router.get("/customer/{customer_id}", response_model=List[OrderView])
def get_orders_by_customer(
    customer_id: UUID,
    user: TokenUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Get a customer's orders (admin or that customer)"""
    ensure_can_act_for(user, customer_id)
    return service.list_orders_by_customer(customer_id)


@router.get("/status/{order_status}", response_model=List[OrderView])
def get_orders_by_status(
    order_status: str,
    user: TokenUser = Depends(require_role(ADMIN)),
    service: OrderService = Depends(get_order_service),
):
    """
    Get orders with an exact status (admin only)

    The match is case-sensitive: 'Pending' is valid, 'pending' is a 400.
    """
    return service.list_orders_by_status(order_status)


@router.get("/{order_id}", response_model=OrderView)
def get_order(
    order_id: UUID,
    user: TokenUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """
    Get one order (admin or the owning customer)

    Other customers get the same 404 as for a missing order, so the existence of
    other orders is not revealed.
    """
    order = service.get_order(order_id)
    if not user.can_act_for(order.customer_id):
        raise NotFoundError(f"Order {order_id} does not exist")
    return order


@router.put("/{order_id}/status", status_code=status.HTTP_204_NO_CONTENT)
def update_order_status(
    order_id: UUID,
    payload: OrderStatusUpdate,
    user: TokenUser = Depends(require_role(ADMIN)),
    service: OrderService = Depends(get_order_service),
):
    """
    Change an order's status (admin only)

    404 unknown order, 400 unknown status, 409 illegal transition.
    """
    service.update_order_status(order_id, payload.new_status)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: UUID,
    user: TokenUser = Depends(require_role(ADMIN)),
    service: OrderService = Depends(get_order_service),
):
    """Delete an order and return its stock (admin only; completed orders are kept)"""
    service.delete_order(order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
