"""
Order Query Service - read paths and projections

Product names are resolved from the catalog on every read, so a renamed
product shows its new name on old orders. Unit prices and totals come
from the order as stored.
"""
from datetime import datetime, timezone
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.domain.order import OrderItemView, OrderStatus, OrderView
from app.models.order import Order
from app.repositories.order_repository import OrderRepository
from app.services.order_status import parse_status


def _as_utc(value: datetime) -> datetime:
    # Stored as UTC; some backends (SQLite) drop the tzinfo
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def to_view(order: Order) -> OrderView:
    """Project an Order entity (with items loaded) into an OrderView"""
    items = [
        OrderItemView(
            product_id=item.product_id,
            product_name=item.product.name if item.product is not None else "",
            unit_price=item.unit_price,
            quantity=item.quantity,
            subtotal=item.unit_price * item.quantity,
        )
        for item in order.items
    ]
    return OrderView(
        id=order.id,
        customer_id=order.customer_id,
        order_date=_as_utc(order.order_date),
        status=order.status,
        shipping_address=order.shipping_address,
        billing_address=order.billing_address,
        total_amount=order.total_amount,
        items=items,
    )


class OrderQueryService:
    """Read-only order queries returning OrderView projections"""

    def __init__(self, order_repository: Optional[OrderRepository] = None):
        self.orders = order_repository or OrderRepository()

    def get(self, session: Session, order_id: UUID) -> OrderView:
        order = self.orders.find_by_id(session, order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} does not exist")
        return to_view(order)

    def list_all(self, session: Session) -> List[OrderView]:
        return [to_view(order) for order in self.orders.find_all(session)]

    def list_by_customer(self, session: Session, customer_id: UUID) -> List[OrderView]:
        return [to_view(order) for order in self.orders.find_by_customer(session, customer_id)]

    def list_by_status(self, session: Session, status: Union[str, OrderStatus]) -> List[OrderView]:
        """Exact, case-sensitive status filter; unknown values raise InvalidArgumentError"""
        parsed = parse_status(status)
        return [to_view(order) for order in self.orders.find_by_status(session, parsed)]
