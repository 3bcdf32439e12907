"""
Order Service - transaction boundary for the order workflow

Each mutating operation (create, delete, status change) runs as exactly
one unit of work: validation, stock movements and the order write commit
together or not at all. Reads go through OrderQueryService.

Author: DSW
Date: 2025-10-17
"""
import logging
from typing import List, Optional, Sequence, Union
from uuid import UUID

from sqlalchemy.orm import Session, sessionmaker

from app.core.database import run_in_transaction, transaction
from app.core.exceptions import ConflictError, NotFoundError
from app.domain.order import OrderStatus, OrderView
from app.repositories.customer_repository import CustomerRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.services.order_builder import OrderBuilder, OrderLine
from app.services.order_query_service import OrderQueryService, to_view
from app.services.order_status import OrderStatusMachine
from app.services.stock_reservation import StockReservation

logger = logging.getLogger(__name__)


class OrderService:
    """
    Service for placing, reading, updating and deleting orders

    Handles:
    - CreateOrder: customer check, stock reservation, aggregate insert
    - DeleteOrder: restock + delete (completed orders are kept)
    - UpdateOrderStatus: legal transitions only, restock on cancel
    - Read paths returning OrderView projections
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ):
        self.session_factory = session_factory
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        self.orders = OrderRepository()
        self.reservation = StockReservation(ProductRepository())
        self.builder = OrderBuilder(CustomerRepository(), self.reservation)
        self.status_machine = OrderStatusMachine(self.reservation, self.orders)
        self.queries = OrderQueryService(self.orders)

    def _run(self, work):
        return run_in_transaction(
            work,
            session_factory=self.session_factory,
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
        )

    def _lock_order(self, session: Session, order_id: UUID):
        order = self.orders.find_by_id(session, order_id, for_update=True)
        if order is None:
            raise NotFoundError(f"Order {order_id} does not exist")
        return order

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(
        self,
        customer_id: UUID,
        shipping_address: str,
        billing_address: str,
        items: Sequence[OrderLine],
    ) -> OrderView:
        """
        Place an order

        Args:
            customer_id: Ordering customer
            shipping_address: Where to ship
            billing_address: Where to bill
            items: (product_id, quantity) lines in input order

        Returns:
            OrderView of the stored order

        Raises:
            InvalidArgumentError: Empty items or non-positive quantity
            NotFoundError: Unknown customer or product
            ConflictError: Insufficient stock or inactive product
        """
        def work(session: Session) -> OrderView:
            order = self.builder.build(session, customer_id, shipping_address, billing_address, items)
            self.orders.add(session, order)
            return to_view(order)

        view = self._run(work)
        logger.info(
            f"Order {view.id} created for customer {view.customer_id}: "
            f"{len(view.items)} items, total {view.total_amount}"
        )
        return view

    def delete_order(self, order_id: UUID) -> bool:
        """
        Delete an order, returning its stock

        Pending and Processing orders are restocked; Cancelled orders were
        already restocked when cancelled; Completed orders cannot be deleted.

        Returns:
            True if stock was restocked by this deletion

        Raises:
            NotFoundError: Unknown order
            ConflictError: Order is Completed
        """
        def work(session: Session) -> bool:
            order = self._lock_order(session, order_id)
            if order.status is OrderStatus.COMPLETED:
                raise ConflictError(f"Order {order_id} is Completed and cannot be deleted")

            # Claim the row so a concurrent transition cannot slip in before the restock
            if not self.orders.compare_and_set_status(session, order_id, order.status, order.status):
                raise ConflictError(f"Order {order_id} was modified concurrently")

            restock = order.status is not OrderStatus.CANCELLED
            if restock:
                self.reservation.restock(session, order.items)
            self.orders.delete(session, order)
            return restock

        restocked = self._run(work)
        logger.info(f"Order {order_id} deleted (restocked: {restocked})")
        return restocked

    def update_order_status(self, order_id: UUID, new_status: Union[str, OrderStatus]) -> OrderView:
        """
        Change an order's status

        Raises:
            NotFoundError: Unknown order
            InvalidArgumentError: new_status is not a recognised status
            ConflictError: Order is terminal or the transition is not allowed
        """
        def work(session: Session):
            order = self._lock_order(session, order_id)
            previous = self.status_machine.transition(session, order, new_status)
            return previous, to_view(order)

        previous, view = self._run(work)
        logger.info(f"Order {order_id} status changed: {previous.value} -> {view.status.value}")
        return view

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: UUID) -> OrderView:
        with transaction(self.session_factory) as session:
            return self.queries.get(session, order_id)

    def list_orders(self) -> List[OrderView]:
        with transaction(self.session_factory) as session:
            return self.queries.list_all(session)

    def list_orders_by_customer(self, customer_id: UUID) -> List[OrderView]:
        with transaction(self.session_factory) as session:
            return self.queries.list_by_customer(session, customer_id)

    def list_orders_by_status(self, status: Union[str, OrderStatus]) -> List[OrderView]:
        with transaction(self.session_factory) as session:
            return self.queries.list_by_status(session, status)
