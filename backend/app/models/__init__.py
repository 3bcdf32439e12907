"""
Modelos de base de datos
"""
from .customer import Customer
from .product import Product
from .order import Order, OrderItem

__all__ = [
    "Customer",
    "Product",
    "Order",
    "OrderItem",
]
