"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.

Author: DSW
Date: 2025-10-17
"""
from app.domain.product import Product, ProductCreate, ProductUpdate
from app.domain.customer import Customer, CustomerCreate, CustomerUpdate
from app.domain.order import (
    OrderStatus,
    OrderCreate,
    OrderItemRequest,
    OrderStatusUpdate,
    OrderView,
    OrderItemView,
)

__all__ = [
    'Product', 'ProductCreate', 'ProductUpdate',
    'Customer', 'CustomerCreate', 'CustomerUpdate',
    'OrderStatus', 'OrderCreate', 'OrderItemRequest', 'OrderStatusUpdate',
    'OrderView', 'OrderItemView',
]
