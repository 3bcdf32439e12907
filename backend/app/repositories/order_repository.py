"""
Order Repository - Data Access Layer for Orders

Persists and loads the Order aggregate (order + items) through the
caller's Session. Items are always loaded with their product so that
views can resolve the current product name.

Author: DSW
Date: 2025-10-17
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from app.domain.order import OrderStatus
from app.models.order import Order, OrderItem


class OrderRepository:
    """
    Repository for Order data access

    All queries for orders are centralized here.
    Lists are returned oldest first (order_date, then id).
    """

    @staticmethod
    def _with_items(stmt):
        # Separate SELECTs for items/products keep FOR UPDATE on the orders row only
        return stmt.options(selectinload(Order.items).selectinload(OrderItem.product))

    def add(self, session: Session, order: Order) -> Order:
        """Insert order and items (items cascade with the order)"""
        session.add(order)
        session.flush()
        return order

    def find_by_id(self, session: Session, order_id: UUID, for_update: bool = False) -> Optional[Order]:
        """
        Find order by ID with items and their products

        Args:
            session: Transaction session
            order_id: Order ID
            for_update: Lock the order row so no other transition runs concurrently

        Returns:
            Order with items or None if not found
        """
        stmt = self._with_items(select(Order).where(Order.id == order_id))
        if for_update:
            stmt = stmt.with_for_update(of=Order)
        return session.execute(stmt).scalar_one_or_none()

    def find_all(self, session: Session) -> List[Order]:
        stmt = self._with_items(select(Order)).order_by(Order.order_date, Order.id)
        return list(session.execute(stmt).scalars())

    def find_by_customer(self, session: Session, customer_id: UUID) -> List[Order]:
        stmt = (
            self._with_items(select(Order))
            .where(Order.customer_id == customer_id)
            .order_by(Order.order_date, Order.id)
        )
        return list(session.execute(stmt).scalars())

    def find_by_status(self, session: Session, status: OrderStatus) -> List[Order]:
        stmt = (
            self._with_items(select(Order))
            .where(Order.status == status)
            .order_by(Order.order_date, Order.id)
        )
        return list(session.execute(stmt).scalars())

    def compare_and_set_status(
        self,
        session: Session,
        order_id: UUID,
        expected: OrderStatus,
        new: OrderStatus,
    ) -> bool:
        """
        Set status only while the stored status is still `expected`

        With expected == new this claims the row for a delete: it takes the
        write lock and fails if another transaction moved the order first.

        Returns:
            True if the row was updated, False if the order changed or is gone
        """
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == expected)
            .values(status=new)
            .execution_options(synchronize_session="fetch")
        )
        return session.execute(stmt).rowcount == 1

    def delete(self, session: Session, order: Order) -> None:
        """Delete order; items go with it"""
        session.delete(order)
        session.flush()
