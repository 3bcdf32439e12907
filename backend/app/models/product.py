"""
Modelo de productos del catálogo
"""
import uuid

from sqlalchemy import Column, Integer, String, Boolean, Text, DECIMAL, Uuid, CheckConstraint

from app.core.database import Base


class Product(Base):
    """
    Productos del catálogo

    stock_quantity only moves down through stock reservation and up
    through restock on order cancellation/deletion.
    """
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("current_unit_price > 0", name="ck_products_price_positive"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    sku = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)

    current_unit_price = Column(DECIMAL(12, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
