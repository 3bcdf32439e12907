"""
Product Repository - Data Access Layer for Products

Every method receives the caller's Session, so reads and writes happen
inside whatever transaction the service opened.

Author: DSW
Date: 2025-10-17
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update, exists, func
from sqlalchemy.orm import Session

from app.models.order import OrderItem
from app.models.product import Product


class ProductRepository:
    """
    Repository for Product data access

    All queries for products are centralized here.
    Stock is only changed through decrement_stock / increment_stock.
    """

    def find_by_id(self, session: Session, product_id: UUID, for_update: bool = False) -> Optional[Product]:
        """
        Find product by ID

        Args:
            session: Transaction session
            product_id: Product ID
            for_update: Lock the row until the transaction ends

        Returns:
            Product or None if not found
        """
        stmt = select(Product).where(Product.id == product_id)
        if for_update:
            stmt = stmt.with_for_update()
        return session.execute(stmt).scalar_one_or_none()

    def find_by_sku(self, session: Session, sku: str, exclude_id: Optional[UUID] = None) -> Optional[Product]:
        """Find product by SKU, optionally ignoring one product ID"""
        stmt = select(Product).where(Product.sku == sku)
        if exclude_id is not None:
            stmt = stmt.where(Product.id != exclude_id)
        return session.execute(stmt).scalars().first()

    def find_all(self, session: Session, active_only: bool = True) -> List[Product]:
        """List products ordered by name"""
        stmt = select(Product)
        if active_only:
            stmt = stmt.where(Product.is_active.is_(True))
        stmt = stmt.order_by(Product.name, Product.sku)
        return list(session.execute(stmt).scalars())

    def count(self, session: Session) -> int:
        return session.execute(select(func.count()).select_from(Product)).scalar_one()

    def add(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.flush()
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.flush()

    def is_referenced(self, session: Session, product_id: UUID) -> bool:
        """True if any order line points at this product"""
        stmt = select(exists().where(OrderItem.product_id == product_id))
        return bool(session.execute(stmt).scalar())

    def current_stock(self, session: Session, product_id: UUID) -> Optional[int]:
        """Read stock straight from the database, bypassing loaded rows"""
        stmt = select(Product.stock_quantity).where(Product.id == product_id)
        return session.execute(stmt).scalar_one_or_none()

    def decrement_stock(self, session: Session, product_id: UUID, quantity: int) -> bool:
        """
        Take quantity units out of stock

        The update only matches while enough stock remains, so a
        concurrent reservation can never push stock below zero.

        Returns:
            True if the row was updated, False if stock was insufficient
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.stock_quantity >= quantity)
            .values(stock_quantity=Product.stock_quantity - quantity)
            .execution_options(synchronize_session="fetch")
        )
        result = session.execute(stmt)
        return result.rowcount == 1

    def increment_stock(self, session: Session, product_id: UUID, quantity: int) -> bool:
        """Put quantity units back into stock; False if the product is gone"""
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(stock_quantity=Product.stock_quantity + quantity)
            .execution_options(synchronize_session="fetch")
        )
        result = session.execute(stmt)
        return result.rowcount == 1
