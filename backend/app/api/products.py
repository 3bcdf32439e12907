"""
Products API Endpoints
Handles product catalog management and queries

Author: DSW
Date: 2025-10-17
"""
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import sessionmaker
from typing import List
from uuid import UUID

from app.core.auth import ADMIN, TokenUser, get_current_user, require_role
from app.core.database import get_session_factory
from app.domain.product import Product, ProductCreate, ProductUpdate
from app.services.product_service import ProductService

router = APIRouter()


def get_product_service(session_factory: sessionmaker = Depends(get_session_factory)) -> ProductService:
    return ProductService(session_factory)


@router.get("/", response_model=List[Product])
def get_products(
    include_inactive: bool = Query(False, description="Include deactivated products"),
    user: TokenUser = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    """Get active products (admins may include inactive ones)"""
    return service.list_products(include_inactive=include_inactive and user.is_admin)


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: UUID,
    user: TokenUser = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    return service.get_product(product_id)


@router.post("/", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    user: TokenUser = Depends(require_role(ADMIN)),
    service: ProductService = Depends(get_product_service),
):
    """Create a product (admin only); 409 if the SKU is taken"""
    return service.create_product(payload)


@router.put("/{product_id}", response_model=Product)
def update_product(
    product_id: UUID,
    payload: ProductUpdate,
    user: TokenUser = Depends(require_role(ADMIN)),
    service: ProductService = Depends(get_product_service),
):
    """Replace product details (admin only); stock is not editable here"""
    return service.update_product(product_id, payload)


@router.patch("/{product_id}", response_model=Product)
def deactivate_product(
    product_id: UUID,
    user: TokenUser = Depends(require_role(ADMIN)),
    service: ProductService = Depends(get_product_service),
):
    """Deactivate a product (admin only)"""
    return service.deactivate_product(product_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: UUID,
    user: TokenUser = Depends(require_role(ADMIN)),
    service: ProductService = Depends(get_product_service),
):
    """Delete a product (admin only); 409 while orders reference it"""
    service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
