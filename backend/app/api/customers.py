"""
Customers API Endpoints

Author: DSW
Date: 2025-10-17
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import sessionmaker
from typing import List
from uuid import UUID

from app.core.auth import ADMIN, TokenUser, ensure_can_act_for, get_current_user, require_role
from app.core.database import get_session_factory
from app.domain.customer import Customer, CustomerCreate, CustomerUpdate
from app.services.customer_service import CustomerService

router = APIRouter()


def get_customer_service(session_factory: sessionmaker = Depends(get_session_factory)) -> CustomerService:
    return CustomerService(session_factory)


@router.get("/", response_model=List[Customer])
def get_customers(
    user: TokenUser = Depends(require_role(ADMIN)),
    service: CustomerService = Depends(get_customer_service),
):
    return service.list_customers()


@router.get("/{customer_id}", response_model=Customer)
def get_customer(
    customer_id: UUID,
    user: TokenUser = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    """Get a customer (admin or the customer themself)"""
    ensure_can_act_for(user, customer_id)
    return service.get_customer(customer_id)


@router.post("/", response_model=Customer, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    user: TokenUser = Depends(require_role(ADMIN)),
    service: CustomerService = Depends(get_customer_service),
):
    """Create a customer (admin only); 409 if the email is taken"""
    return service.create_customer(payload)


@router.put("/{customer_id}", response_model=Customer)
def update_customer(
    customer_id: UUID,
    payload: CustomerUpdate,
    user: TokenUser = Depends(require_role(ADMIN)),
    service: CustomerService = Depends(get_customer_service),
):
    return service.update_customer(customer_id, payload)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(
    customer_id: UUID,
    user: TokenUser = Depends(require_role(ADMIN)),
    service: CustomerService = Depends(get_customer_service),
):
    """Delete a customer (admin only); 409 while they own orders"""
    service.delete_customer(customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
