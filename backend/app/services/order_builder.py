"""
Order Aggregate Builder

Validates a new order request, reserves stock for its lines and builds
the Order + OrderItem aggregate with prices frozen at build time.
Nothing is committed here: the caller owns the transaction.

Author: DSW
Date: 2025-10-17
"""
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.domain.order import OrderItemRequest, OrderStatus
from app.models.order import Order, OrderItem
from app.repositories.customer_repository import CustomerRepository
from app.services.stock_reservation import StockReservation

MAX_ADDRESS_LENGTH = 200

OrderLine = Union[Tuple[UUID, int], OrderItemRequest]


def calculate_total(items: Iterable[OrderItem]) -> Decimal:
    """Order total: sum of unit_price * quantity over all items"""
    return sum((item.unit_price * item.quantity for item in items), Decimal("0"))


def normalize_lines(items: Sequence[OrderLine]) -> List[Tuple[UUID, int]]:
    """
    Turn request lines into (product_id, quantity) pairs

    Raises:
        InvalidArgumentError: empty list or a non-positive quantity
    """
    if not items:
        raise InvalidArgumentError("An order needs at least one item")

    lines = []
    for item in items:
        if isinstance(item, OrderItemRequest):
            product_id, quantity = item.product_id, item.quantity
        else:
            product_id, quantity = item
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidArgumentError(f"Quantity for product {product_id} must be a positive integer")
        lines.append((product_id, quantity))
    return lines


def _check_address(label: str, value: str) -> str:
    if not value or not value.strip():
        raise InvalidArgumentError(f"{label} is required")
    if len(value) > MAX_ADDRESS_LENGTH:
        raise InvalidArgumentError(f"{label} must be at most {MAX_ADDRESS_LENGTH} characters")
    return value


class OrderBuilder:
    """Builds a fully priced order aggregate inside a transaction"""

    def __init__(
        self,
        customer_repository: Optional[CustomerRepository] = None,
        reservation: Optional[StockReservation] = None,
    ):
        self.customers = customer_repository or CustomerRepository()
        self.reservation = reservation or StockReservation()

    def build(
        self,
        session: Session,
        customer_id: UUID,
        shipping_address: str,
        billing_address: str,
        items: Sequence[OrderLine],
    ) -> Order:
        """
        Validate the request, reserve stock and return an unsaved Order

        Steps:
        1. Validate addresses and lines
        2. Check the customer exists
        3. Reserve stock for every line, in input order
        4. Create items with the product's current price and compute the total

        Raises:
            InvalidArgumentError: malformed request
            NotFoundError: unknown customer or product
            ConflictError: inactive product or insufficient stock
        """
        _check_address("Shipping address", shipping_address)
        _check_address("Billing address", billing_address)
        lines = normalize_lines(items)

        if not self.customers.exists(session, customer_id):
            raise NotFoundError(f"Customer {customer_id} does not exist")

        reservations = self.reservation.reserve(session, lines)

        order = Order(
            id=uuid.uuid4(),
            customer_id=customer_id,
            order_date=datetime.now(timezone.utc),
            shipping_address=shipping_address,
            billing_address=billing_address,
            status=OrderStatus.PENDING,
        )
        for position, reserved in enumerate(reservations):
            order.items.append(
                OrderItem(
                    id=uuid.uuid4(),
                    product_id=reserved.product.id,
                    product=reserved.product,
                    position=position,
                    quantity=reserved.quantity,
                    unit_price=reserved.product.current_unit_price,
                )
            )
        order.total_amount = calculate_total(order.items)
        return order
