"""
Customer Service - customer management

Author: DSW
Date: 2025-10-17
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, sessionmaker

from app.core.database import run_in_transaction, transaction
from app.core.exceptions import ConflictError, NotFoundError
from app.domain.customer import Customer, CustomerCreate, CustomerUpdate
from app.models.customer import Customer as CustomerModel
from app.repositories.customer_repository import CustomerRepository

logger = logging.getLogger(__name__)


class CustomerService:
    """Service for customer business logic"""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory
        self.customers = CustomerRepository()

    def _get(self, session: Session, customer_id: UUID) -> CustomerModel:
        customer = self.customers.find_by_id(session, customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} does not exist")
        return customer

    def _check_email(self, session: Session, email: str, exclude_id: Optional[UUID] = None) -> None:
        if self.customers.find_by_email(session, email, exclude_id=exclude_id) is not None:
            raise ConflictError(f"Email '{email}' is already in use")

    def list_customers(self) -> List[Customer]:
        with transaction(self.session_factory) as session:
            return [Customer.model_validate(row) for row in self.customers.find_all(session)]

    def get_customer(self, customer_id: UUID) -> Customer:
        with transaction(self.session_factory) as session:
            return Customer.model_validate(self._get(session, customer_id))

    def create_customer(self, data: CustomerCreate) -> Customer:
        """Create a customer; email must be unique"""
        def work(session: Session) -> Customer:
            self._check_email(session, data.email)
            customer = self.customers.add(session, CustomerModel(**data.model_dump()))
            return Customer.model_validate(customer)

        customer = run_in_transaction(work, session_factory=self.session_factory)
        logger.info(f"Customer {customer.id} created")
        return customer

    def update_customer(self, customer_id: UUID, data: CustomerUpdate) -> Customer:
        def work(session: Session) -> Customer:
            customer = self._get(session, customer_id)
            self._check_email(session, data.email, exclude_id=customer_id)
            customer.name = data.name
            customer.email = data.email
            customer.address = data.address
            session.flush()
            return Customer.model_validate(customer)

        return run_in_transaction(work, session_factory=self.session_factory)

    def delete_customer(self, customer_id: UUID) -> None:
        """Delete a customer that owns no orders"""
        def work(session: Session) -> None:
            customer = self._get(session, customer_id)
            if self.customers.has_orders(session, customer_id):
                raise ConflictError(f"Customer {customer_id} has orders and cannot be deleted")
            self.customers.delete(session, customer)

        run_in_transaction(work, session_factory=self.session_factory)
        logger.info(f"Customer {customer_id} deleted")
