"""
Stock Reservation - checks and decrements inventory for order lines

Evaluate-then-apply: every line is locked and checked before any stock
moves, and the decrements run in the caller's transaction, so a failure
anywhere (here or later in the same unit of work) rolls all of them back.

Author: DSW
Date: 2025-10-17
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, InsufficientStockError, NotFoundError
from app.models.order import OrderItem
from app.models.product import Product
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


@dataclass
class Reservation:
    """One reserved order line: the locked product row and the quantity taken"""

    product: Product
    quantity: int


class StockReservation:
    """
    Service for reserving and restocking product inventory

    Handles:
    - Existence and availability checks per line, in input order
    - Repeated lines for the same product (checked against their sum)
    - Conditional decrements that can never drive stock negative
    - Restock of a deleted or cancelled order's items
    """

    def __init__(self, product_repository: Optional[ProductRepository] = None):
        self.products = product_repository or ProductRepository()

    def reserve(self, session: Session, lines: Sequence[Tuple[UUID, int]]) -> List[Reservation]:
        """
        Reserve stock for (product_id, quantity) lines

        Args:
            session: Transaction session shared with the order insert
            lines: Order lines in input order

        Returns:
            One Reservation per line, in input order

        Raises:
            NotFoundError: A product does not exist
            ConflictError: A product is inactive
            InsufficientStockError: Requested quantity exceeds stock
        """
        reservations: List[Reservation] = []
        requested: Dict[UUID, int] = {}
        skus: Dict[UUID, str] = {}

        # 1. Evaluate: lock and check every line before touching stock
        for product_id, quantity in lines:
            product = self.products.find_by_id(session, product_id, for_update=True)
            if product is None:
                raise NotFoundError(f"Product {product_id} does not exist")
            if not product.is_active:
                raise ConflictError(f"Product SKU {product.sku} is not available")

            total = requested.get(product_id, 0) + quantity
            if product.stock_quantity < total:
                logger.warning(
                    f"Insufficient stock for SKU {product.sku}: requested {total}, "
                    f"available {product.stock_quantity}"
                )
                raise InsufficientStockError(product.sku, total, product.stock_quantity)

            requested[product_id] = total
            skus[product_id] = product.sku
            reservations.append(Reservation(product=product, quantity=quantity))

        # 2. Apply: one decrement per product
        for product_id, quantity in requested.items():
            if not self.products.decrement_stock(session, product_id, quantity):
                # Stock moved between the check and the update
                available = self.products.current_stock(session, product_id)
                logger.warning(
                    f"Stock for SKU {skus[product_id]} changed during reservation: "
                    f"requested {quantity}, available {available}"
                )
                raise InsufficientStockError(skus[product_id], quantity, available)

        return reservations

    def restock(self, session: Session, items: Iterable[OrderItem]) -> int:
        """
        Return each item's quantity to its product's stock

        Returns:
            Total units restocked
        """
        units = 0
        for item in items:
            if self.products.increment_stock(session, item.product_id, item.quantity):
                units += item.quantity
            else:
                logger.warning(f"Product {item.product_id} not found while restocking order {item.order_id}")
        return units
