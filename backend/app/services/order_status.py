"""
Order Status Machine

Pending -> Processing -> Completed
Pending/Processing -> Cancelled

Completed and Cancelled are terminal. Moving an order to Cancelled
restocks its items in the same transaction.
"""
import logging
from typing import Optional, Union

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, InvalidArgumentError
from app.domain.order import ORDER_STATUS_TRANSITIONS, OrderStatus
from app.models.order import Order
from app.repositories.order_repository import OrderRepository
from app.services.stock_reservation import StockReservation

logger = logging.getLogger(__name__)


def parse_status(value: Union[str, OrderStatus]) -> OrderStatus:
    """
    Convert a raw value into an OrderStatus (exact, case-sensitive match)

    Raises:
        InvalidArgumentError: value is not one of the four statuses
    """
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(status.value for status in OrderStatus)
        raise InvalidArgumentError(f"'{value}' is not a valid order status. Expected one of: {allowed}")


def check_transition(current: OrderStatus, new: OrderStatus) -> None:
    """Raise ConflictError unless current -> new is in the transition table"""
    if current.is_terminal:
        raise ConflictError(f"Order is {current.value}; its status can no longer change")
    if new not in ORDER_STATUS_TRANSITIONS[current]:
        raise ConflictError(f"Cannot change order status from {current.value} to {new.value}")


class OrderStatusMachine:
    """Applies legal status transitions to a locked order"""

    def __init__(
        self,
        reservation: Optional[StockReservation] = None,
        order_repository: Optional[OrderRepository] = None,
    ):
        self.reservation = reservation or StockReservation()
        self.orders = order_repository or OrderRepository()

    def transition(self, session: Session, order: Order, new_status: Union[str, OrderStatus]) -> OrderStatus:
        """
        Move order to new_status

        The write is a compare-and-set on the status read from the order,
        so a transition that raced with another one is rejected instead of
        overwriting it.

        Args:
            session: Transaction session (order must be locked in it)
            order: Order entity
            new_status: Target status, raw or parsed

        Returns:
            The previous status

        Raises:
            InvalidArgumentError: unknown status value
            ConflictError: illegal transition, or the order changed concurrently
        """
        target = parse_status(new_status)
        current = order.status
        check_transition(current, target)

        if not self.orders.compare_and_set_status(session, order.id, current, target):
            raise ConflictError(f"Order {order.id} was modified concurrently; status is no longer {current.value}")

        if target is OrderStatus.CANCELLED:
            units = self.reservation.restock(session, order.items)
            logger.info(f"Order {order.id} cancelled, restocked {units} units")

        return current
