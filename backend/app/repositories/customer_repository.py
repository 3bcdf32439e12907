"""
Customer Repository - Data Access Layer for Customers

Author: DSW
Date: 2025-10-17
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, exists, func
from sqlalchemy.orm import Session

from app.models.customer import Customer
from app.models.order import Order


class CustomerRepository:
    """Repository for Customer data access"""

    def exists(self, session: Session, customer_id: UUID) -> bool:
        """Check that a customer with this ID exists"""
        stmt = select(exists().where(Customer.id == customer_id))
        return bool(session.execute(stmt).scalar())

    def find_by_id(self, session: Session, customer_id: UUID) -> Optional[Customer]:
        return session.get(Customer, customer_id)

    def find_by_email(self, session: Session, email: str, exclude_id: Optional[UUID] = None) -> Optional[Customer]:
        """Find customer by email, optionally ignoring one customer ID"""
        stmt = select(Customer).where(Customer.email == email)
        if exclude_id is not None:
            stmt = stmt.where(Customer.id != exclude_id)
        return session.execute(stmt).scalars().first()

    def find_all(self, session: Session) -> List[Customer]:
        stmt = select(Customer).order_by(Customer.name, Customer.email)
        return list(session.execute(stmt).scalars())

    def count(self, session: Session) -> int:
        return session.execute(select(func.count()).select_from(Customer)).scalar_one()

    def add(self, session: Session, customer: Customer) -> Customer:
        session.add(customer)
        session.flush()
        return customer

    def delete(self, session: Session, customer: Customer) -> None:
        session.delete(customer)
        session.flush()

    def has_orders(self, session: Session, customer_id: UUID) -> bool:
        """True if the customer owns at least one order"""
        stmt = select(exists().where(Order.customer_id == customer_id))
        return bool(session.execute(stmt).scalar())
