"""
Order Domain Models

Represents order-related entities and the order status machine.
These are the single source of truth for order data structure.

Author: DSW
Date: 2025-10-17
"""
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Dict, FrozenSet, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID


class OrderStatus(str, Enum):
    """
    Order lifecycle

    Pending (initial) -> Processing -> Completed (terminal)
    Pending/Processing -> Cancelled (terminal)
    """

    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

# Legal transitions; anything not listed is rejected
ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


class _CamelModel(BaseModel):
    """Serializes as camelCase, accepts both camelCase and snake_case"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class OrderItemRequest(_CamelModel):
    """One (product, quantity) line of a new order"""

    product_id: UUID = Field(..., description="Product catalog ID")
    quantity: int = Field(..., description="Quantity ordered", ge=1)


class OrderCreate(_CamelModel):
    """Schema for creating a new order"""

    customer_id: UUID = Field(..., description="Customer ID")
    shipping_address: str = Field(..., min_length=1, max_length=200)
    billing_address: str = Field(..., min_length=1, max_length=200)
    items: List[OrderItemRequest] = Field(..., min_length=1, description="Order lines in input order")


class OrderStatusUpdate(_CamelModel):
    """
    Schema for changing an order's status

    The value is kept as a raw string so that unknown values reach the
    status machine and are rejected there with a 400.
    """

    new_status: str = Field(..., description="Pending, Processing, Completed or Cancelled")


class OrderItemView(_CamelModel):
    """
    Order Item view - a line item with its product name resolved at read time

    Fields:
        product_id: Reference to product catalog
        product_name: Current product name
        unit_price: Price per unit captured when the order was placed
        quantity: Number of units ordered
        subtotal: unit_price * quantity
    """

    product_id: UUID
    product_name: str
    unit_price: Decimal
    quantity: int
    subtotal: Decimal


class OrderView(_CamelModel):
    """
    Order view returned by every order operation

    Fields:
        id: Order ID
        customer_id: Owning customer
        order_date: When the order was placed (UTC)
        status: Current status
        shipping_address / billing_address: Addresses given at creation
        total_amount: Sum of item subtotals
        items: Line items in input order
    """

    id: UUID
    customer_id: UUID
    order_date: datetime
    status: OrderStatus
    shipping_address: str
    billing_address: str
    total_amount: Decimal
    items: List[OrderItemView] = Field(default_factory=list)

    @property
    def item_count(self) -> int:
        """Total number of items in order"""
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        """Total quantity of all items"""
        return sum(item.quantity for item in self.items)
