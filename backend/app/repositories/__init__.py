"""
Repository Layer - Data Access

This layer handles all database queries and returns ORM entities.
Repositories never open or commit transactions: they work on the
Session handed to them by a service.

Author: DSW
Date: 2025-10-17
"""
from app.repositories.product_repository import ProductRepository
from app.repositories.customer_repository import CustomerRepository
from app.repositories.order_repository import OrderRepository

__all__ = [
    'ProductRepository',
    'CustomerRepository',
    'OrderRepository',
]
