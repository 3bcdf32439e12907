"""
Product Service - catalog management

Stock is set when a product is created and afterwards only moves through
orders (reservation, cancellation, deletion).

Author: DSW
Date: 2025-10-17
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, sessionmaker

from app.core.database import run_in_transaction, transaction
from app.core.exceptions import ConflictError, NotFoundError
from app.domain.product import Product, ProductCreate, ProductUpdate
from app.models.product import Product as ProductModel
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """Service for product catalog business logic"""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory
        self.products = ProductRepository()

    def _get(self, session: Session, product_id: UUID) -> ProductModel:
        product = self.products.find_by_id(session, product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} does not exist")
        return product

    def _check_sku(self, session: Session, sku: str, exclude_id: Optional[UUID] = None) -> None:
        if self.products.find_by_sku(session, sku, exclude_id=exclude_id) is not None:
            raise ConflictError(f"SKU '{sku}' is already in use")

    def list_products(self, include_inactive: bool = False) -> List[Product]:
        with transaction(self.session_factory) as session:
            rows = self.products.find_all(session, active_only=not include_inactive)
            return [Product.model_validate(row) for row in rows]

    def get_product(self, product_id: UUID) -> Product:
        with transaction(self.session_factory) as session:
            return Product.model_validate(self._get(session, product_id))

    def create_product(self, data: ProductCreate) -> Product:
        """Create a product; SKU must be unique"""
        def work(session: Session) -> Product:
            self._check_sku(session, data.sku)
            product = self.products.add(session, ProductModel(**data.model_dump()))
            return Product.model_validate(product)

        product = run_in_transaction(work, session_factory=self.session_factory)
        logger.info(f"Product {product.id} created (SKU {product.sku}, stock {product.stock_quantity})")
        return product

    def update_product(self, product_id: UUID, data: ProductUpdate) -> Product:
        """Replace product details; price changes never touch existing orders"""
        def work(session: Session) -> Product:
            product = self._get(session, product_id)
            self._check_sku(session, data.sku, exclude_id=product_id)
            changes = data.model_dump()
            if changes["is_active"] is None:
                del changes["is_active"]
            for field, value in changes.items():
                setattr(product, field, value)
            session.flush()
            return Product.model_validate(product)

        return run_in_transaction(work, session_factory=self.session_factory)

    def deactivate_product(self, product_id: UUID) -> Product:
        """Hide a product from the catalog without deleting it"""
        def work(session: Session) -> Product:
            product = self._get(session, product_id)
            product.is_active = False
            session.flush()
            return Product.model_validate(product)

        return run_in_transaction(work, session_factory=self.session_factory)

    def delete_product(self, product_id: UUID) -> None:
        """Delete a product that no order line references"""
        def work(session: Session) -> None:
            product = self._get(session, product_id)
            if self.products.is_referenced(session, product_id):
                raise ConflictError(f"Product SKU {product.sku} is referenced by existing orders")
            self.products.delete(session, product)

        run_in_transaction(work, session_factory=self.session_factory)
        logger.info(f"Product {product_id} deleted")
